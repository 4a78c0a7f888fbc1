import logging
from typing import List, Optional

from smartnotes.core.domain.errors import ProviderError, ValidationError
from smartnotes.core.interfaces.ports import ILLMProvider
from smartnotes.core.services.summary_prompts import (
    SummaryType,
    build_summary_prompt,
    build_tags_prompt,
    parse_tags_response,
    strip_boilerplate,
)

logger = logging.getLogger(__name__)


class SummarizationService:
    """Generates note summaries and tag suggestions through an LLM provider."""

    def __init__(self, llm: ILLMProvider):
        self.llm = llm

    def generate_summary(
        self,
        text: str,
        model: Optional[str] = None,
        summary_type: SummaryType = SummaryType.BRIEF,
    ) -> str:
        if not text or not text.strip():
            raise ValidationError("There is no text to summarize")

        prompt = build_summary_prompt(text, summary_type)
        try:
            response = self.llm.generate(prompt, model=model)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Error generating summary: {e}")

        summary = strip_boilerplate(response)
        if not summary:
            raise ProviderError("The model returned an empty summary")
        logger.info("Generated %s summary (%d chars)", summary_type.value, len(summary))
        return summary

    def generate_tags(self, text: str, title: str = "", model: Optional[str] = None) -> List[str]:
        if not text or not text.strip():
            raise ValidationError("There is no text to tag")

        prompt = build_tags_prompt(text, title)
        try:
            response = self.llm.generate(prompt, model=model)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Error generating tags: {e}")

        tags = parse_tags_response(response)
        logger.info("Suggested tags for %r: %s", title, ", ".join(tags))
        return tags

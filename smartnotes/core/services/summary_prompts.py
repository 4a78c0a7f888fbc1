"""
Prompts for note summaries and tag suggestions.

Summary Types:
- BRIEF: 2-3 sentence overview
- DETAILED: Main concepts and important details
- BULLETS: 3-5 key takeaways as bullet points
"""

import re
from enum import Enum
from typing import List

MAX_TEXT_LENGTH = 10000
TRUNCATION_MARKER = "... (text truncated due to length)"
MAX_TAGS = 5


class SummaryType(Enum):
    BRIEF = "brief"
    DETAILED = "detailed"
    BULLETS = "bullets"

    @property
    def display_name(self) -> str:
        """Human-readable name for menus."""
        mapping = {
            "brief": "Brief",
            "detailed": "Detailed",
            "bullets": "Bullet Points",
        }
        return mapping.get(self.value)


SUMMARY_PROMPTS = {
    SummaryType.BRIEF: "Please provide a brief, concise summary (2-3 sentences) of the following text, capturing its main points:\n\n{text}",
    SummaryType.DETAILED: "Please provide a detailed summary of the following text, explaining the main concepts and important details:\n\n{text}",
    SummaryType.BULLETS: "Please summarize the following text as 3-5 bullet points, highlighting the key takeaways:\n\n{text}",
}


TAGS_PROMPT = """Suggest up to {max_tags} short topic tags for the note below.

Rules:
1. Each tag is one to three words.
2. Use Title Case, no '#' symbols.
3. Respond with the tags only, separated by commas, on a single line.

TITLE: {title}

NOTE:
{text}

Tags:"""


# Lead-ins models like to put before the actual answer.
BOILERPLATE_PATTERNS = [
    r"^(sure|certainly|of course|absolutely)[!,.]?\s*",
    r"^here(?: is|'s| are) (?:a |an |the |your |some )?(?:brief |concise |detailed |short )?(?:summary|summaries|bullet points|key takeaways|tags|suggested tags)(?: of (?:the|this) (?:following )?(?:text|note))?\s*[:.]?\s*",
    r"^(?:the )?(?:suggested )?tags(?: are| for this note are)?\s*:\s*",
    r"^summary\s*:\s*",
]


def truncate_text(text: str, max_length: int = MAX_TEXT_LENGTH) -> str:
    if len(text) > max_length:
        return text[:max_length] + TRUNCATION_MARKER
    return text


def build_summary_prompt(text: str, summary_type: SummaryType) -> str:
    template = SUMMARY_PROMPTS.get(summary_type)
    if template is None:
        template = "Please summarize the following text in 2-3 sentences:\n\n{text}"
    return template.format(text=truncate_text(text))


def build_tags_prompt(text: str, title: str) -> str:
    return TAGS_PROMPT.format(max_tags=MAX_TAGS, title=title, text=truncate_text(text))


def strip_boilerplate(response: str) -> str:
    """Removes known lead-in phrases from the start of a model response."""
    cleaned = response.strip()
    changed = True
    while changed and cleaned:
        changed = False
        for pattern in BOILERPLATE_PATTERNS:
            stripped = re.sub(pattern, "", cleaned, count=1, flags=re.IGNORECASE).strip()
            if stripped != cleaned:
                cleaned = stripped
                changed = True
    return cleaned


def parse_tags_response(response: str) -> List[str]:
    """Parse a comma or newline separated tag list into distinct tags."""
    cleaned = strip_boilerplate(response)

    tags = []
    for raw in re.split(r"[,\n]", cleaned):
        # Drop bullets, numbering, hashes and quotes around each tag
        tag = re.sub(r"^\s*(?:[-*•]|\d+[.)])\s*", "", raw)
        tag = tag.strip().strip("#\"'`").strip()
        if tag and tag.lower() not in (t.lower() for t in tags):
            tags.append(tag)
    return tags[:MAX_TAGS]

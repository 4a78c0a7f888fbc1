import os
from typing import Optional

import requests

from smartnotes.core.domain.errors import ProviderError
from smartnotes.core.interfaces.ports import ILLMProvider

OPENROUTER_MODELS = [
    ("openai/gpt-3.5-turbo", "OpenAI GPT-3.5 Turbo (Free)"),
    ("anthropic/claude-3-haiku", "Anthropic Claude 3 Haiku (Free)"),
    ("meta-llama/llama-3-8b-instruct", "Meta Llama 3 8B Instruct (Free)"),
    ("deepseek/deepseek-chat-v3-0324:free", "DeepSeek Chat V3 (Free)"),
    ("deepseek/deepseek-r1:free", "DeepSeek R1 (Free)"),
    ("google/gemini-2.0-flash-exp:free", "Google Gemini 2.0 Flash Exp (Free)"),
    ("meta-llama/llama-4-maverick:free", "Meta Llama 4 Maverick (Free)"),
]
DEFAULT_MODEL = OPENROUTER_MODELS[0][0]
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterProvider(ILLMProvider):
    def __init__(
        self,
        api_key: str = None,
        model_name: str = None,
        base_url: str = None,
        app_title: str = "Smart Note Organizer",
        timeout: float = 60.0,
    ):
        self.api_key = api_key or os.getenv("OPENROUTER_API_KEY")
        self.model_name = model_name or os.getenv("OPENROUTER_MODEL", DEFAULT_MODEL)
        self.base_url = (base_url or os.getenv("OPENROUTER_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.api_url = f"{self.base_url}/chat/completions"
        self.app_title = app_title
        self.timeout = timeout

        if not self.api_key:
            raise ProviderError("API key is required. Add it in settings or set OPENROUTER_API_KEY.")

    def generate(self, prompt: str, model: Optional[str] = None) -> str:
        payload = {
            "model": model or self.model_name,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "X-Title": self.app_title,
        }

        try:
            response = requests.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"OpenRouter connection failed: {e}")

        if not response.ok:
            raise ProviderError(f"OpenRouter request failed: {self._error_message(response)}")

        try:
            data = response.json()
        except ValueError:
            raise ProviderError("OpenRouter returned a response that is not JSON")

        # Chat models answer in message.content, some older ones in text
        choices = data.get("choices") if isinstance(data, dict) else None
        choices = choices or []
        if choices:
            choice = choices[0]
            message = choice.get("message") or {}
            if message.get("content"):
                return message["content"]
            if choice.get("text"):
                return choice["text"]

        raise ProviderError(
            "The model returned a response in an unexpected format. Please try a different model."
        )

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
            error = body.get("error") if isinstance(body, dict) else None
            if isinstance(error, dict) and error.get("message"):
                return error["message"]
        except ValueError:
            pass
        return response.reason or f"HTTP {response.status_code}"

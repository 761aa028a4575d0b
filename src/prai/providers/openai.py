from __future__ import annotations

from typing import Any

import httpx

from prai.core.settings import OpenAISettings
from prai.providers.base import Provider, dig_text


class OpenAIProvider(Provider[OpenAISettings]):
    """OpenAI Chat Completions API (and compatible servers via base_url)."""
    name = "openai"

    def build_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/chat/completions"

    def build_request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.config.temperature,
            "top_p": self.config.top_p,
            "max_tokens": self.config.max_tokens,
            "frequency_penalty": self.config.frequency_penalty,
            "presence_penalty": self.config.presence_penalty,
            "stream": False,
        }

    def parse_response(self, document: Any) -> str:
        return dig_text(document, "choices", 0, "message", "content")

    def get_client(self) -> httpx.Client:
        return self._build_client({
            "Authorization": f"Bearer {self.config.api_key.get_secret_value()}",
        })

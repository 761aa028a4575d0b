from __future__ import annotations

from typing import Any
from urllib.parse import quote

from prai.core.settings import GoogleSettings
from prai.providers.base import Provider, dig_text


class GoogleProvider(Provider[GoogleSettings]):
    """
    Gemini generateContent API.

    The key travels in the URL query string, so the URL must never be logged;
    the default client (no auth headers) is enough.
    """
    name = "google"

    def build_url(self) -> str:
        return (
            f"{self.config.base_url.rstrip('/')}/models/{self.config.model}:generateContent"
            f"?key={quote(self.config.api_key.get_secret_value(), safe='')}"
        )

    def build_request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "topP": self.config.top_p,
                "maxOutputTokens": self.config.max_tokens,
            },
        }

    def parse_response(self, document: Any) -> str:
        return dig_text(document, "candidates", 0, "content", "parts", 0, "text")

from __future__ import annotations

from typing import Any

import httpx

from prai.core.settings import AnthropicSettings
from prai.providers.base import Provider, dig_text


class AnthropicProvider(Provider[AnthropicSettings]):
    """Anthropic Messages API."""
    name = "anthropic"

    def build_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/messages"

    def build_request_body(self, prompt: str) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
        }
        # Sampling params are optional here; the API rejects explicit nulls
        if self.config.temperature is not None:
            body["temperature"] = self.config.temperature
        if self.config.top_p is not None:
            body["top_p"] = self.config.top_p
        body["messages"] = [{"role": "user", "content": prompt}]
        return body

    def parse_response(self, document: Any) -> str:
        return dig_text(document, "content", 0, "text")

    def get_client(self) -> httpx.Client:
        return self._build_client({
            "x-api-key": self.config.api_key.get_secret_value(),
            "anthropic-version": self.config.version,
        })

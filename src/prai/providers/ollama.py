from __future__ import annotations

from typing import Any

from prai.core.settings import OllamaSettings
from prai.providers.base import Provider, dig_text


class OllamaProvider(Provider[OllamaSettings]):
    name = "ollama"

    def build_url(self) -> str:
        return f"{self.config.url.rstrip('/')}/api/generate"

    def build_request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.config.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.config.temperature,
                "top_p": self.config.top_p,
                "num_predict": self.config.num_predict,
            },
        }

    def parse_response(self, document: Any) -> str:
        return dig_text(document, "response")

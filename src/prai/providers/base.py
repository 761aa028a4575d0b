"""
Shared request pipeline for all LLM providers.

A backend implements four hooks (build_url, build_request_body,
parse_response and, when it authenticates, get_client) and inherits
from_config plus the default make_request:

    prompt -> url -> body -> HTTP POST -> parse response -> text

make_request is never overridden per backend.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, Optional, TypeVar

import httpx
from pydantic import BaseModel

from prai.core.errors import ApiRequestFailed, MalformedResponse
from prai.core.request import Request
from prai.prompts.composer import render_request

logger = logging.getLogger(__name__)

# Seconds; no other timeout or cancellation is enforced at this layer
HTTP_TIMEOUT = 30

JSON_HEADERS = {"Content-Type": "application/json"}

ConfigT = TypeVar("ConfigT", bound=BaseModel)


def dig(document: Any, *path: str | int) -> Any:
    """
    Walk dict keys and list indices; None as soon as a step is missing
    or has the wrong type.
    """
    current = document
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return None
            current = current[step]
    return current


def dig_text(document: Any, *path: str | int) -> str:
    """Like dig, but always a string: missing or non-string text becomes ""."""
    value = dig(document, *path)
    return value if isinstance(value, str) else ""


class Provider(ABC, Generic[ConfigT]):
    """One LLM backend behind the uniform make_request contract."""

    name: ClassVar[str]

    def __init__(self, config: ConfigT):
        self.config = config

    @classmethod
    def from_config(cls, config: ConfigT) -> Provider[ConfigT]:
        # model_dump_json redacts credentials
        logger.debug("Create %s provider from %s", cls.name, config.model_dump_json())
        return cls(config)

    # =========================================================================
    # BACKEND HOOKS
    # =========================================================================

    @abstractmethod
    def build_url(self) -> str:
        ...

    @abstractmethod
    def build_request_body(self, prompt: str) -> dict[str, Any]:
        ...

    @abstractmethod
    def parse_response(self, document: Any) -> str:
        """Reduce the provider's envelope to plain text; "" when the field is missing."""

    def get_client(self) -> httpx.Client:
        """Plain JSON client; backends that authenticate add their headers."""
        return self._build_client()

    def _build_client(self, headers: Optional[dict[str, str]] = None) -> httpx.Client:
        return httpx.Client(headers={**JSON_HEADERS, **(headers or {})}, timeout=HTTP_TIMEOUT)

    # =========================================================================
    # DEFAULT PIPELINE
    # =========================================================================

    def build_prompt(self, request: Request) -> str:
        return render_request(request)

    def make_http_request(self, url: str, body: dict[str, Any]) -> Any:
        """
        POST `body` as JSON and return the decoded response document.

        Raises:
            ApiRequestFailed: endpoint unreachable or non-success status.
            MalformedResponse: success status but the body is not JSON.
        """
        try:
            with self.get_client() as client:
                response = client.post(url, json=body)
        except httpx.HTTPError as transport_error:
            raise ApiRequestFailed(None, str(transport_error)) from transport_error
        except UnicodeEncodeError as header_error:
            # Raised while building auth headers; the message names the position, never the value
            raise ApiRequestFailed(
                None, f"request headers must be ASCII ({header_error.reason} at position {header_error.start})"
            ) from header_error

        if not response.is_success:
            logger.warning("%s API request failed with status %s", self.name, response.status_code)
            raise ApiRequestFailed(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as decode_error:
            raise MalformedResponse(response.text) from decode_error

    def make_request(self, request: Request) -> str:
        prompt = self.build_prompt(request)
        url = self.build_url()
        body = self.build_request_body(prompt)

        logger.info("Sending request to %s (model %s)", self.name, self.config.model)
        document = self.make_http_request(url, body)

        text = self.parse_response(document)
        if not text:
            logger.warning("%s response had no generated text", self.name)
        return text

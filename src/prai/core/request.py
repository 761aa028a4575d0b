from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_EXCLUDES: tuple[str, ...] = (":!*.lock",)


class Request(BaseModel):
    """
    One PR generation request, built fresh per invocation.
    Not provider-specific: every backend consumes the same Request.
    """
    model_config = ConfigDict(frozen=True)

    base: str
    head: Optional[str] = None  # None means the working tree
    exclude: tuple[str, ...] = Field(default=DEFAULT_EXCLUDES)

    # Overrides; the prompt composer falls back to built-in defaults
    role: Optional[str] = None
    directive: Optional[str] = None
    template: Optional[str] = None

    is_title: bool = False

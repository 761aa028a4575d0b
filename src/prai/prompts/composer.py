from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Sequence

from langchain_core.prompts import PromptTemplate

from prai.core.request import Request
from prai.git.diff import get_diff
from prai.prompts.defaults import (
    DEFAULT_DIRECTIVE,
    DEFAULT_ROLE,
    DEFAULT_TEMPLATE,
    DEFAULT_TITLE_DIRECTIVE,
)

logger = logging.getLogger(__name__)

# Section order is fixed: role, directive, template, diff
PROMPT_LAYOUT = """[ROLE]
{role}
[DIRECTIVE]
{directive}
[TEMPLATE]
{template}
[CONTEXT]
{diff}"""

_prompt = PromptTemplate.from_template(PROMPT_LAYOUT)

TRAILING_WHITESPACE_RE = re.compile(r"[ \t]+(?=\r?\n)")


def normalize_whitespace(text: str) -> str:
    """Strip spaces and tabs that sit right before a newline (LF or CRLF)."""
    return TRAILING_WHITESPACE_RE.sub("", text)


def render(
    base: str,
    head: Optional[str],
    excludes: Sequence[str],
    role: Optional[str] = None,
    directive: Optional[str] = None,
    template: Optional[str] = None,
    is_title: bool = False,
    cwd: Optional[Path] = None,
) -> str:
    """
    Build the prompt for the diff between `base` and `head`.

    Missing (or empty) overrides fall back to the built-in defaults; the
    directive default depends on `is_title`. NoChanges and DiffFailed from the
    diff extractor propagate as-is.
    """
    if not directive:
        directive = DEFAULT_TITLE_DIRECTIVE if is_title else DEFAULT_DIRECTIVE

    diff = get_diff(base, head, excludes, cwd=cwd)

    prompt = _prompt.format(
        role=role or DEFAULT_ROLE,
        directive=directive,
        template=template or DEFAULT_TEMPLATE,
        diff=diff,
    )
    logger.debug("Rendered prompt: %d chars", len(prompt))
    return normalize_whitespace(prompt)


def render_request(request: Request, cwd: Optional[Path] = None) -> str:
    return render(
        request.base,
        request.head,
        request.exclude,
        role=request.role,
        directive=request.directive,
        template=request.template,
        is_title=request.is_title,
        cwd=cwd,
    )

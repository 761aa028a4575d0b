"""
Error taxonomy for prai.

Every failure is terminal for the single request and propagates unchanged to
the CLI boundary, which turns it into a message on stderr and an exit code.
"""
from __future__ import annotations

from typing import Optional


class PraiError(Exception):
    """Base class for all prai errors."""
    exit_code: int = 1
    user_message: str = "prai failed"


# =============================================================================
# GIT
# =============================================================================


class DiffFailed(PraiError):
    """`git diff` exited non-zero (or could not be started)."""
    user_message = "Could not compute the git diff"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Git diff failed: {detail.strip()}")


class NoChanges(PraiError):
    """The diff between the two revisions is empty after exclusions."""
    exit_code = 2
    user_message = "Nothing to summarize"

    def __init__(self, base: str, head: Optional[str] = None):
        self.base = base
        self.head = head
        target = head if head is not None else "the working tree"
        super().__init__(f"No changes between {base} and {target}")


# =============================================================================
# CONFIGURATION
# =============================================================================


class ConfigError(PraiError):
    """Config file missing, unreadable or structurally invalid."""
    user_message = "Invalid configuration"


class ProfileNotFound(ConfigError):
    user_message = "Unknown profile"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unable to find profile `{name}`")


# =============================================================================
# PROVIDER HTTP
# =============================================================================


class ApiRequestFailed(PraiError):
    """
    The provider endpoint was unreachable or answered with a non-success
    status. `status` is None when no HTTP response was received; `body` holds
    the upstream text verbatim.
    """
    user_message = "Provider API request failed"

    def __init__(self, status: Optional[int], body: str):
        self.status = status
        self.body = body
        if status is None:
            super().__init__(f"API request failed: {body}")
        else:
            super().__init__(f"API request failed with status {status}: {body}")


class MalformedResponse(PraiError):
    """A success response whose body is not a JSON document."""
    user_message = "Provider returned an unreadable response"

    def __init__(self, body: str):
        self.body = body
        super().__init__(f"Provider response is not valid JSON: {body[:200]}")

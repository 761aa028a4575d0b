from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from prai.core.errors import DiffFailed, NoChanges

logger = logging.getLogger(__name__)

# Fallback when the remote default branch cannot be determined
FALLBACK_BRANCH = "HEAD"

DEFAULT_BRANCH_PREFIX = "HEAD branch: "


def _to_pathspec(pattern: str) -> str:
    """
    Turn an exclusion pattern into a git pathspec.
    Magic pathspecs (":!*.lock", ":(exclude)docs/") pass through; bare globs
    ("*.lock") are excluded with ":!".
    """
    if pattern.startswith(":"):
        return pattern
    return f":!{pattern}"


def build_diff_command(
    base: str,
    head: Optional[str] = None,
    excludes: Sequence[str] = (),
) -> list[str]:
    """
    Revisions come before "--" and pathspecs after it, so a revision that is
    also a file name stays a revision.

    Raises:
        DiffFailed: a revision starts with "-" and git would read it as an option.
    """
    revisions = [base, head] if head else [base]
    for revision in revisions:
        if revision.startswith("-"):
            raise DiffFailed(f"invalid revision {revision!r}: revisions cannot start with '-'")

    command = ["git", "diff", *revisions, "--"]
    command.extend(_to_pathspec(pattern) for pattern in excludes)
    return command


def get_diff(
    base: str,
    head: Optional[str] = None,
    excludes: Sequence[str] = (),
    cwd: Optional[Path] = None,
) -> str:
    """
    Return the unified diff between `base` and `head` (or the working tree
    when `head` is None), leaving out paths matched by `excludes`.

    Raises:
        DiffFailed: git exited non-zero or could not be run.
        NoChanges: the diff is empty after exclusions.
    """
    command = build_diff_command(base, head, excludes)
    logger.debug("Running %s", " ".join(command))

    try:
        result = subprocess.run(command, capture_output=True, cwd=cwd, check=False)
    except OSError as spawn_error:
        raise DiffFailed(str(spawn_error)) from spawn_error

    if result.returncode != 0:
        raise DiffFailed(result.stderr.decode("utf-8", errors="replace"))

    diff = result.stdout.decode("utf-8", errors="replace")
    if not diff.strip():
        raise NoChanges(base, head)

    logger.info("Diff between %s and %s: %d lines", base, head or "working tree", diff.count("\n"))
    return diff


# =============================================================================
# DEFAULT BRANCH
# =============================================================================


def parse_default_branch(remote_output: str) -> Optional[str]:
    """Extract the branch from the `HEAD branch: main` line of `git remote show`."""
    for line in remote_output.splitlines():
        line = line.strip()
        if line.startswith(DEFAULT_BRANCH_PREFIX):
            branch = line[len(DEFAULT_BRANCH_PREFIX):].strip()
            # git prints "(unknown)" when the remote HEAD is ambiguous
            if not branch or branch == "(unknown)":
                return None
            return branch
    return None


def default_branch(remote: str = "origin", cwd: Optional[Path] = None) -> str:
    """
    The remote's default branch, or HEAD when it cannot be determined.
    Queries the remote, so callers compute it once and pass it along.
    """
    try:
        result = subprocess.run(
            ["git", "remote", "show", remote],
            capture_output=True,
            cwd=cwd,
            check=False,
        )
    except OSError as spawn_error:
        logger.warning("Could not run git to find the default branch: %s", spawn_error)
        return FALLBACK_BRANCH

    if result.returncode != 0:
        logger.info("git remote show %s failed, using %s", remote, FALLBACK_BRANCH)
        return FALLBACK_BRANCH

    branch = parse_default_branch(result.stdout.decode("utf-8", errors="replace"))
    return branch or FALLBACK_BRANCH

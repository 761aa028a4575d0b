"""
Command-line entry point (`prai`).

Generates a PR description (or title with --title) from the diff between two
revisions and prints it to stdout:

    prai                      # default branch vs working tree
    prai main feature/login   # between two revisions
    prai -p local --title     # title only, with the `local` profile
    prai --show-config        # resolved profile, credentials redacted
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from prai.core.errors import ConfigError, PraiError
from prai.core.request import DEFAULT_EXCLUDES, Request
from prai.core.settings import Profile, default_config_path, load_settings
from prai.git.diff import default_branch
from prai.providers import provider_for

logger = logging.getLogger("prai.cli")

LOG_FORMAT = "[prai] %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prai",
        description="Generate PR descriptions from git diffs using an LLM provider.",
    )
    parser.add_argument("base", nargs="?", help="Base revision (default: the remote's default branch)")
    parser.add_argument("head", nargs="?", help="Head revision (default: the working tree)")
    parser.add_argument(
        "-e", "--exclude",
        action="append",
        metavar="PATTERN",
        help=f"Pathspec to exclude from the diff; repeatable (default: {' '.join(DEFAULT_EXCLUDES)})",
    )
    parser.add_argument("-p", "--profile", help="Config profile to use (default: the file's `default`)")
    parser.add_argument("-c", "--config", type=Path, help="Config file (default: ~/.config/prai/config.toml)")
    parser.add_argument("-t", "--title", action="store_true", help="Generate a PR title instead of a description")
    parser.add_argument("--role", help="Override the role text")
    parser.add_argument("--directive", help="Override the directive text")
    parser.add_argument("--template-file", type=Path, help="File with the PR template to follow")
    parser.add_argument("--show-config", action="store_true", help="Print the resolved profile and exit")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v, -vv)")
    return parser


def configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    # httpx logs full request URLs; Google keys live in the query string
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _read_template(path: Optional[Path]) -> Optional[str]:
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as read_error:
        raise ConfigError(f"Cannot read template file {path}: {read_error}") from read_error


def build_request(args: argparse.Namespace, profile: Profile, base: str) -> Request:
    """
    CLI flags win over profile fields; unset ones fall back to built-in defaults
    later. A profile directive describes the full PR, so title mode ignores it.
    """
    return Request(
        base=base,
        head=args.head,
        exclude=tuple(args.exclude) if args.exclude else DEFAULT_EXCLUDES,
        role=args.role or profile.role,
        directive=args.directive or (None if args.title else profile.directive),
        template=_read_template(args.template_file) or profile.template,
        is_title=args.title,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    load_dotenv()

    config_path = args.config or default_config_path()

    try:
        settings = load_settings(config_path)
        profile = settings.resolve(args.profile)
        logger.info("Using profile %s (%s)", profile.name, profile.provider.provider)

        if args.show_config:
            print(profile.model_dump_json(exclude_none=True, indent=2))
            return 0

        # Resolved once here and carried in the Request
        base = args.base or default_branch()
        request = build_request(args, profile, base)

        text = provider_for(profile).make_request(request)
    except PraiError as error:
        logger.debug("Request failed", exc_info=True)
        print(f"prai: {error}", file=sys.stderr)
        return error.exit_code

    print(text)
    return 0

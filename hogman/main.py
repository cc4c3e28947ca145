"""Main CLI entry point for hogman."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

import httpx
from rich.logging import RichHandler

from hogman import __version__
from hogman.commands import COMMANDS
from hogman.core.config import CLIConfig
from hogman.core.credentials import CredentialStore
from hogman.core.errors import ErrorKind, HogmanError
from hogman.ui.console import make_console
from hogman.ui.output import Renderer

logger = logging.getLogger("hogman")


def global_flags() -> argparse.ArgumentParser:
    """Flags accepted both before and after the subcommand.

    Defaults are suppressed so a flag given at one level is not reset by
    the parser of another level.
    """
    flags = argparse.ArgumentParser(add_help=False)
    flags.add_argument(
        "--json",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Output as JSON (structured, LLM-friendly)",
    )
    flags.add_argument(
        "--account", metavar="NAME", default=argparse.SUPPRESS, help="Use a specific account profile"
    )
    flags.add_argument(
        "--project", metavar="ID", type=int, default=argparse.SUPPRESS, help="Override the project ID"
    )
    flags.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help="Log HTTP requests to stderr"
    )
    return flags


def build_parser() -> argparse.ArgumentParser:
    parents = [global_flags()]
    parser = argparse.ArgumentParser(
        prog="hogman",
        description="PostHog API CLI bridge for LLM consumption",
        parents=parents,
    )
    parser.add_argument("--version", action="version", version=f"hogman {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>", required=True)
    for command in COMMANDS:
        command.register(subparsers, parents)
    return parser


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich; stdout is reserved for data."""
    handler = RichHandler(
        console=make_console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    # httpcore traces every socket event at DEBUG
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def run(
    argv: Optional[Sequence[str]] = None,
    store: Optional[CredentialStore] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> int:
    """Parse ``argv``, run one command and return the process exit code."""
    args = build_parser().parse_args(argv)

    config = CLIConfig(
        json_mode=getattr(args, "json", False),
        account=getattr(args, "account", None),
        project=getattr(args, "project", None),
        verbose=getattr(args, "verbose", False),
    )
    if store is not None:
        config.config_path = store.path
    configure_logging(config.verbose)

    out = Renderer(json_mode=config.json_mode)
    command = args.handler(config, out, store=store, transport=transport)

    try:
        command.execute(args)
    except HogmanError as e:
        logger.debug("Command failed", exc_info=True)
        out.print_error(e)
        return 1
    except KeyboardInterrupt:
        out.print_error(HogmanError(ErrorKind.UNKNOWN, "Interrupted"))
        return 1
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        out.print_error(HogmanError(ErrorKind.UNKNOWN, str(e) or type(e).__name__))
        return 1
    return 0


def main() -> None:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()

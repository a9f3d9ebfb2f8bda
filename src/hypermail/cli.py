"""Command-line interface for Hypermail.

This module provides the main entry point, which starts the terminal UI.
"""

from __future__ import annotations

import argparse
import curses
import sys
from pathlib import Path

import structlog

from hypermail import __version__
from hypermail.config import Settings, get_settings
from hypermail.store import LocalStore
from hypermail.tui import HypermailApp
from hypermail.utils import configure_logging

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hypermail", description="Terminal email client powered by Resend"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to the JSON config document (default: settings config_path)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="File receiving log output (default: settings log_file)",
    )
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _resolve_settings(parsed: argparse.Namespace) -> Settings:
    settings = get_settings()
    overrides: dict[str, object] = {}
    if parsed.config is not None:
        overrides["config_path"] = parsed.config
    if parsed.log_file is not None:
        overrides["log_file"] = parsed.log_file
    if parsed.debug:
        overrides["debug"] = True
    return settings.model_copy(update=overrides) if overrides else settings


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Hypermail CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    parsed = _build_parser().parse_args(args)
    settings = _resolve_settings(parsed)

    try:
        log_file = configure_logging(settings)
    except OSError as exc:
        print(f"hypermail: cannot open log file {settings.log_file}: {exc}", file=sys.stderr)
        return 1

    try:
        logger.info("hypermail_started", version=__version__, debug=settings.debug)
        app = HypermailApp(LocalStore(settings.config_path), settings)
        curses.wrapper(app.run)
    except KeyboardInterrupt:
        logger.info("hypermail_interrupted")
    finally:
        log_file.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())

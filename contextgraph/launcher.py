"""ContextGraph launcher.

Provides a stable entry point that configures logging and runs preflight
checks before importing GTK-related modules, which gives clearer error
messages on new systems.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from contextgraph import __version__

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contextgraph",
        description="Interactive force-directed concept graph",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging verbosity (default: CONTEXTGRAPH_LOG_LEVEL or the settings file)",
    )
    parser.add_argument(
        "--light",
        action="store_true",
        help="Start with the light color scheme",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_log_level(cli_level: Optional[str], settings_level: str) -> str:
    """Command line beats environment, environment beats settings."""
    if cli_level:
        return cli_level
    env_level = os.environ.get("CONTEXTGRAPH_LOG_LEVEL")
    if env_level:
        return env_level.upper()
    return settings_level.upper()


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    args, gtk_args = build_parser().parse_known_args(argv)

    from contextgraph.config import load_settings

    settings = load_settings()
    level = resolve_log_level(args.log_level, settings.log_level)
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format=LOG_FORMAT)
    if args.light:
        settings.dark = False

    from contextgraph.preflight import run_preflight_or_die

    run_preflight_or_die(require_display=True, check_deps=True)

    from contextgraph.app import main as app_main

    return int(app_main(settings, [sys.argv[0]] + gtk_args))


if __name__ == "__main__":
    raise SystemExit(main())

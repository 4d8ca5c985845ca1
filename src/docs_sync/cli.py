"""Command-line entry point for docs-sync."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

import yaml
from dotenv import load_dotenv

from . import __version__
from .config import load_config
from .config_loader import (
    discover_config_files,
    ensure_config,
    load_hierarchical_config,
)
from .config_schema import UnifiedConfig, build_config
from .errors import DocsSyncError
from .logger import setup_logging
from .sync.engine import SyncEngine
from .sync.models import RunState
from .sync.reporter import format_sync_report, format_verify_failure
from .sync.watcher import WatchCoordinator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docs-sync",
        description="Transform authored documentation and publish only the files that changed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Transform src/docs into docs
  docs-sync

  # Check that docs is up to date (exit 1 if not)
  docs-sync --verify

  # Transform, then stage the published tree
  docs-sync --git

  # Keep the published tree in sync while editing
  docs-sync --watch

  # Publish into the site generator tree instead
  docs-sync --vitepress --watch
        """,
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Compare only, write nothing; exit 1 if any published file is out of date",
    )
    parser.add_argument(
        "--git",
        action="store_true",
        help="Run 'git add' on the destination tree when files changed (ignored with --verify)",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="After the initial run, keep syncing on filesystem changes",
    )
    parser.add_argument(
        "--vitepress",
        action="store_true",
        help="Alternate output mode: publish into the site tree, no header, admonition callouts",
    )
    parser.add_argument(
        "--no-header",
        action="store_true",
        help="Do not prepend the autogenerated-file notice",
    )
    parser.add_argument(
        "--source",
        help="Override the source tree (takes precedence over DOCS_SYNC_SOURCE_ROOT and config files)",
    )
    parser.add_argument(
        "--destination",
        help="Override the destination tree (takes precedence over DOCS_SYNC_DESTINATION_ROOT and config files)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        help="Also write log output to this file",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a starter .docs_sync/config.yml if no config file exists, then exit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"docs-sync version {__version__}",
    )
    return parser


def _load_unified_config() -> tuple[UnifiedConfig, dict[str, Any] | None]:
    """Return the unified config and the ``docs`` section fallbacks.

    Fallbacks are ``None`` when no config file exists, so built-in defaults
    and environment variables decide everything.
    """
    if not discover_config_files():
        return UnifiedConfig(), None
    unified = build_config(load_hierarchical_config())
    yaml_fallbacks = {
        k: v for k, v in unified.docs.model_dump().items() if v is not None
    }
    return unified, yaml_fallbacks


def main(argv: list[str] | None = None) -> int:
    """Run docs-sync and return the process exit code."""
    args = build_parser().parse_args(argv)

    # .env first, so ${VAR} interpolation in config files can use it
    load_dotenv()

    try:
        unified, yaml_fallbacks = _load_unified_config()
    except (OSError, ValueError, yaml.YAMLError) as exc:
        setup_logging(debug=args.debug, log_file=args.log_file)
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR

    setup_logging(
        debug=args.debug,
        log_file=args.log_file or unified.logging.file,
        level=unified.logging.level,
    )

    if args.init_config:
        path = ensure_config()
        print(f"Config file: {path}")
        return EXIT_OK

    try:
        config = load_config(
            verify=args.verify,
            git=args.git,
            watch=args.watch,
            vitepress=args.vitepress,
            no_header=args.no_header,
            debug=args.debug,
            source_root=args.source,
            destination_root=args.destination,
            yaml_fallbacks=yaml_fallbacks,
        )
    except ValueError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR

    if config.debug and not args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    engine = SyncEngine(config)
    state = RunState()

    try:
        report = engine.run(state)
    except DocsSyncError as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE

    logger.debug("%s", format_sync_report(report))

    if report.exit_code:
        logger.warning(
            "%s",
            format_verify_failure(
                str(config.source_root), str(config.active_destination_root)
            ),
        )
        return report.exit_code

    if config.watch:
        if config.verify:
            logger.warning("--watch is ignored together with --verify")
        else:
            WatchCoordinator(engine, state).run()

    return EXIT_OK


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    run()

"""Command line entry point for svg-sheet.

``svg-sheet build`` (the default) combines every SVG file of a directory into
one sprite of ``<pattern>`` elements. ``svg-sheet watch`` builds once and
then rebuilds incrementally whenever the directory changes, until SIGINT or
SIGTERM.
"""

import argparse
import logging
import signal
import sys
from collections.abc import Sequence
from pathlib import Path
from types import FrameType

import yaml
from pydantic import ValidationError

from svg_sheet.constants import (
    APP_VERSION,
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_INPUT_DIRECTORY,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_POLL_INTERVAL_MS,
    VALID_LOG_FORMATS,
)
from svg_sheet.exceptions import (
    ConfigFileNotFoundError,
    InvalidConfigError,
    SvgSheetError,
    chain_exception,
)
from svg_sheet.models.config import AppConfig
from svg_sheet.sprite.assembler import build_sprite
from svg_sheet.sprite.watcher import SpriteWatcher
from svg_sheet.utils.early_error_handler import (
    handle_keyboard_interrupt,
    handle_unexpected_error,
    report_error,
)
from svg_sheet.utils.logging import setup_logging

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with the build and watch subcommands."""
    parser = argparse.ArgumentParser(
        prog="svg-sheet",
        description="Combine a directory of SVG files into one sprite of <pattern> elements.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument(
        "-d",
        "--directory",
        type=Path,
        default=None,
        help=f"Directory containing the SVG files (default: {DEFAULT_INPUT_DIRECTORY})",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        default=None,
        help=f"Sprite file to write (default: {DEFAULT_OUTPUT_FILE})",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file; command line flags take precedence",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Run the full pipeline without writing the sprite",
    )
    parser.add_argument(
        "--fail-on-warn",
        action="store_true",
        default=None,
        help="Fail the build if any warning was reported",
    )
    parser.add_argument(
        "--debounce-ms",
        type=int,
        default=None,
        help=f"Quiet period before a watch rebuild (default: {DEFAULT_DEBOUNCE_MS})",
    )
    parser.add_argument(
        "--poll-interval-ms",
        type=int,
        default=None,
        help=f"Interval between directory scans in watch mode (default: {DEFAULT_POLL_INTERVAL_MS})",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only report errors")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Report progress")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level; overrides --quiet and --verbose",
    )
    parser.add_argument(
        "--log-format",
        choices=VALID_LOG_FORMATS,
        default=None,
        help="Log output format (default: text)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="{build,watch}")
    subparsers.add_parser("build", help="Build the sprite once (default)")
    subparsers.add_parser("watch", help="Build, then rebuild whenever the directory changes")
    return parser


def load_app_config(args: argparse.Namespace) -> AppConfig:
    """Load the configuration file, if any, and apply command line overrides.

    Args:
        args: Parsed command line arguments.

    Returns:
        The effective configuration.

    Raises:
        ConfigFileNotFoundError: If --config names a missing file.
        InvalidConfigError: If the file or the resulting values are invalid.
    """
    try:
        config = AppConfig.from_yaml(args.config) if args.config is not None else AppConfig()
    except FileNotFoundError as e:
        raise chain_exception(
            ConfigFileNotFoundError("Configuration file not found", {"path": str(args.config)}),
            e,
        )
    except (yaml.YAMLError, ValidationError, OSError, UnicodeDecodeError) as e:
        raise chain_exception(
            InvalidConfigError(
                "Invalid configuration file", {"path": str(args.config), "error": str(e)}
            ),
            e,
        )

    data = config.model_dump()
    overrides = {
        ("build", "directory"): args.directory,
        ("build", "output"): args.file,
        ("build", "dry_run"): args.dry_run,
        ("build", "strict"): args.fail_on_warn,
        ("watch", "debounce_ms"): args.debounce_ms,
        ("watch", "poll_interval_ms"): args.poll_interval_ms,
        ("logging", "format"): args.log_format,
    }
    for (section, key), value in overrides.items():
        if value is not None:
            data[section][key] = value

    if args.log_level is not None:
        data["logging"]["level"] = args.log_level
    elif args.quiet:
        data["logging"]["level"] = "ERROR"
    elif args.verbose:
        data["logging"]["level"] = "INFO"

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise chain_exception(
            InvalidConfigError("Invalid command line option", {"error": str(e)}), e
        )


def run_watch(config: AppConfig) -> None:
    """Run watch mode until SIGINT or SIGTERM.

    Both signals ask the watcher to stop; a rebuild in progress completes
    first. Previous signal handlers are restored on return.
    """
    watcher = SpriteWatcher(config.build, config.watch)

    def _request_stop(signum: int, frame: FrameType | None) -> None:
        logger.info(f"Received {signal.Signals(signum).name}, stopping")
        watcher.stop()

    previous = {sig: signal.signal(sig, _request_stop) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        watcher.run()
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the svg-sheet command.

    Args:
        argv: Arguments without the program name; sys.argv is used by default.

    Returns:
        Process exit status: 0 on success, 1 on any error.
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_app_config(args)
        setup_logging(config.logging, "svg_sheet")

        if args.command == "watch":
            run_watch(config)
        else:
            build_sprite(config.build)
    except SvgSheetError as e:
        report_error(e)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        handle_keyboard_interrupt()
        return EXIT_INTERRUPTED
    except Exception as e:
        handle_unexpected_error(e)
        return EXIT_FAILURE

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())

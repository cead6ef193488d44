"""Logging setup for the svg_sheet logger tree.

Modules log through ``logging.getLogger(__name__)``; this module attaches a
single handler to the top-level logger whose structlog formatter renders
every record as JSON or as a plain console line.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

import structlog
from structlog.stdlib import ProcessorFormatter

from svg_sheet.constants import BYTES_PER_MEGABYTE
from svg_sheet.models.config import LoggingConfig
from svg_sheet.utils import file_utils
from svg_sheet.utils.early_error_handler import handle_startup_error


def _build_formatter(log_format: str) -> ProcessorFormatter:
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format.lower() == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
    )


def _open_log_file(config: LoggingConfig) -> RotatingFileHandler:
    log_path = file_utils.normalize_path(config.file)
    file_utils.ensure_dir_exists(log_path.parent)
    return RotatingFileHandler(
        log_path,
        maxBytes=config.max_size_mb * BYTES_PER_MEGABYTE,
        backupCount=config.backup_count,
    )


def setup_logging(config: LoggingConfig, name: str) -> logging.Logger:
    """Attach one formatted handler to the named logger.

    Records go to a rotating log file when ``config.file`` is set, otherwise to
    stderr. A log file that cannot be opened is reported and stderr is used
    instead. Calling this again replaces the previous handler.

    Args:
        config: Logging configuration.
        name: Logger name; module loggers below it inherit the handler.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.handlers = []

    level = getattr(logging, config.level.upper(), logging.WARNING)
    logger.setLevel(level)

    handler: logging.Handler | None = None
    file_error = None
    if config.file:
        try:
            handler = _open_log_file(config)
        except OSError as e:
            file_error = f"Failed to set up file logging: {e}"
            handle_startup_error("LOGGING_FILE_ERROR", file_error, {"log_file": str(config.file)})
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(_build_formatter(config.format))
    handler.setLevel(level)
    logger.addHandler(handler)

    if file_error:
        logger.error(file_error)
    return logger

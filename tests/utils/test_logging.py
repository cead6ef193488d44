"""Tests for the logging module.

Tests cover the setup_logging function, including configuration of log levels,
formatters, and handlers with various output formats.
"""

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from unittest.mock import patch

import pytest
from structlog.stdlib import ProcessorFormatter

from svg_sheet.models.config import LoggingConfig
from svg_sheet.utils.logging import setup_logging

LOGGER_NAME = "svg_sheet.tests"


@pytest.fixture()
def basic_config() -> LoggingConfig:
    """Create a basic logging configuration with no file output."""
    return LoggingConfig(level="INFO", file=None, format="json")


@pytest.fixture()
def file_config(tmp_path: Path) -> LoggingConfig:
    """Create a logging configuration with text file output."""
    return LoggingConfig(
        level="DEBUG",
        file=str(tmp_path / "logs" / "svg-sheet.log"),
        format="text",
        max_size_mb=2,
        backup_count=4,
    )


@pytest.fixture(autouse=True)
def reset_test_logger() -> None:
    """Start each test with a logger that has no handlers."""
    logging.getLogger(LOGGER_NAME).handlers = []


def test_setup_logging_basic(basic_config: LoggingConfig) -> None:
    """Logs go to stderr when no file is configured."""
    logger = setup_logging(basic_config, LOGGER_NAME)

    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)
    assert logger.handlers[0].stream is sys.stderr
    assert isinstance(logger.handlers[0].formatter, ProcessorFormatter)


def test_setup_logging_replaces_handlers(basic_config: LoggingConfig) -> None:
    """Calling setup twice does not duplicate handlers."""
    setup_logging(basic_config, LOGGER_NAME)
    logger = setup_logging(basic_config, LOGGER_NAME)
    assert len(logger.handlers) == 1


def test_setup_logging_json_format(basic_config: LoggingConfig) -> None:
    """The JSON renderer is used for the json format."""
    with patch("structlog.processors.JSONRenderer") as mock_json_renderer:
        setup_logging(basic_config, LOGGER_NAME)
        assert mock_json_renderer.call_count == 1


def test_setup_logging_text_format(basic_config: LoggingConfig) -> None:
    """The console renderer is used for the text format."""
    basic_config.format = "text"
    with patch("structlog.dev.ConsoleRenderer") as mock_console_renderer:
        setup_logging(basic_config, LOGGER_NAME)
        assert mock_console_renderer.call_count == 1


def test_setup_logging_with_file(file_config: LoggingConfig) -> None:
    """A configured file gets a rotating handler and its directory is created."""
    logger = setup_logging(file_config, LOGGER_NAME)

    assert len(logger.handlers) == 1
    file_handler = logger.handlers[0]
    assert isinstance(file_handler, RotatingFileHandler)
    assert file_handler.baseFilename == str(file_config.file)
    assert file_handler.maxBytes == 2 * 1024 * 1024
    assert file_handler.backupCount == 4
    assert Path(str(file_config.file)).parent.exists()
    file_handler.close()


def test_setup_logging_writes_records(file_config: LoggingConfig) -> None:
    """Records from child loggers reach the file."""
    logger = setup_logging(file_config, LOGGER_NAME)
    logging.getLogger(f"{LOGGER_NAME}.child").warning("MissingWidth in arrow.svg")
    for handler in logger.handlers:
        handler.flush()
    content = Path(str(file_config.file)).read_text(encoding="utf-8")
    assert "MissingWidth in arrow.svg" in content
    logger.handlers[0].close()


def test_setup_logging_file_error(file_config: LoggingConfig) -> None:
    """File setup failures fall back to stderr and are reported."""
    with (
        patch("pathlib.Path.mkdir", side_effect=PermissionError("Permission denied")),
        patch("svg_sheet.utils.logging.handle_startup_error") as mock_startup_error,
        patch("logging.Logger.error") as mock_error,
    ):
        logger = setup_logging(file_config, LOGGER_NAME)

    assert len(logger.handlers) == 1
    assert logger.handlers[0].stream is sys.stderr
    assert mock_startup_error.call_args[0][0] == "LOGGING_FILE_ERROR"
    error_msg = mock_error.call_args[0][0]
    assert "Failed to set up file logging" in error_msg
    assert "Permission denied" in error_msg


def test_setup_logging_levels(basic_config: LoggingConfig) -> None:
    """Valid levels are applied; unknown ones fall back to WARNING."""
    basic_config.level = "DEBUG"
    assert setup_logging(basic_config, LOGGER_NAME).level == logging.DEBUG

    basic_config.level = "ERROR"
    assert setup_logging(basic_config, LOGGER_NAME).level == logging.ERROR

    basic_config.level = "INVALID_LEVEL"
    assert setup_logging(basic_config, LOGGER_NAME).level == logging.WARNING


def test_setup_logging_json_records(tmp_path: Path) -> None:
    """JSON output carries the event, level and logger name of stdlib records."""
    config = LoggingConfig(level="INFO", file=str(tmp_path / "json.log"), format="json")
    logger = setup_logging(config, LOGGER_NAME)
    logging.getLogger(f"{LOGGER_NAME}.sprite").info("Wrote 2 patterns")
    logger.handlers[0].close()

    record = json.loads((tmp_path / "json.log").read_text(encoding="utf-8").strip())
    assert record["event"] == "Wrote 2 patterns"
    assert record["level"] == "info"
    assert record["logger"] == f"{LOGGER_NAME}.sprite"
    assert "timestamp" in record

"""Error reporting for failures before or outside of logging.

The command line entry point uses these helpers to put errors on stderr in
a consistent shape, whether or not logging has been configured.
"""

import sys
from datetime import datetime
from typing import Any


def handle_startup_error(
    error_type: str, message: str, details: dict[str, Any] | None = None
) -> None:
    """Handle errors that occur before logging is configured.

    Args:
        error_type: Type of error (e.g., "CONFIG_ERROR", "LOGGING_FILE_ERROR")
        message: Main error message
        details: Optional dictionary of additional error details
    """
    timestamp = datetime.now().isoformat()

    sys.stderr.write(f"\n[{timestamp}] {error_type}: {message}\n")

    if details:
        sys.stderr.write("Details:\n")
        for key, value in details.items():
            sys.stderr.write(f"  {key}: {value}\n")

    sys.stderr.flush()


def report_error(error: BaseException) -> None:
    """Write a failed command's error, and its cause if any, to stderr.

    Args:
        error: The error that ended the command
    """
    sys.stderr.write(f"Error: {error}\n")
    if error.__cause__ is not None:
        sys.stderr.write(f"Caused by: {error.__cause__}\n")
    sys.stderr.flush()


def handle_keyboard_interrupt() -> None:
    """Handle keyboard interrupt gracefully."""
    sys.stderr.write("\n\nShutdown requested by user (Ctrl+C)\n")
    sys.stderr.flush()


def handle_unexpected_error(error: Exception) -> None:
    """Handle unexpected errors.

    Args:
        error: The unexpected exception
    """
    timestamp = datetime.now().isoformat()
    sys.stderr.write(f"\n[{timestamp}] Unexpected Error: {type(error).__name__}: {error}\n")
    sys.stderr.write("This is likely a bug. Please report it with the full error details.\n")
    sys.stderr.flush()

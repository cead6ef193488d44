"""Custom exception hierarchy for svg-sheet.

This module defines domain-specific exceptions so that every failure a build
can hit reaches the caller as a typed error carrying structured context.

Exception Hierarchy:
    SvgSheetError (Base)
    ├── ConfigurationError
    │   ├── InvalidConfigError
    │   └── ConfigFileNotFoundError
    ├── ParseError
    │   ├── NoRootElementError
    │   ├── UnterminatedRootElementError
    │   ├── UnbalancedRootError
    │   └── MalformedAttributeError
    ├── BuildError
    │   ├── DuplicateIdError
    │   ├── NoSvgFilesError
    │   └── WarningsPresentError
    └── SpriteIOError
        ├── InputDirectoryError
        ├── SourceReadError
        └── OutputWriteError
"""

from typing import Any


# Base Exception
class SvgSheetError(Exception):
    """Base exception for all svg-sheet errors.

    This is the root exception that all custom exceptions inherit from,
    allowing for broad exception handling when needed.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary containing additional error context
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize the exception with message and optional details.

        Args:
            message: Human-readable error description
            details: Optional dictionary containing additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the exception."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


# Configuration Exceptions
class ConfigurationError(SvgSheetError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration contains invalid values.

    Example:
        raise InvalidConfigError(
            "Invalid configuration file",
            {"path": "svg-sheet.yaml", "error": "debounce_ms must be >= 0"}
        )
    """
    pass


class ConfigFileNotFoundError(ConfigurationError):
    """Raised when configuration file cannot be found.

    Example:
        raise ConfigFileNotFoundError(
            "Configuration file not found",
            {"path": "svg-sheet.yaml"}
        )
    """
    pass


# Parse Exceptions
class ParseError(SvgSheetError):
    """Base exception for source documents that cannot be parsed.

    The parser does not know which file it is reading; the assembler adds a
    ``file`` entry to ``details`` before the error leaves the build.
    """

    def with_file(self, file: str) -> "ParseError":
        """Attach the offending file name to the error details.

        Args:
            file: Name of the source file being parsed

        Returns:
            The same exception, for use in a ``raise`` statement
        """
        self.details = {"file": file, **self.details}
        return self


class NoRootElementError(ParseError):
    """Raised when a document contains no ``<svg`` start tag.

    Example:
        raise NoRootElementError("No root <svg> element found", {"file": "arrow.svg"})
    """
    pass


class UnterminatedRootElementError(ParseError):
    """Raised when the root ``<svg`` start tag never closes with ``>``.

    Example:
        raise UnterminatedRootElementError(
            "Root <svg> start tag is never closed",
            {"file": "arrow.svg", "offset": 0}
        )
    """
    pass


class UnbalancedRootError(ParseError):
    """Raised when no ``</svg>`` matches the root start tag.

    Example:
        raise UnbalancedRootError(
            "No matching </svg> for root element",
            {"file": "arrow.svg", "depth": 2}
        )
    """
    pass


class MalformedAttributeError(ParseError):
    """Raised when the root attribute list cannot be scanned.

    Example:
        raise MalformedAttributeError(
            "Unterminated quoted value",
            {"span": (6, 12), "fragment": "\\"24 ..."}
        )
    """
    pass


# Build Exceptions
class BuildError(SvgSheetError):
    """Base exception for errors that abort a whole sprite build."""
    pass


class DuplicateIdError(BuildError):
    """Raised when two source files derive the same pattern id.

    Attributes:
        pattern_id: The colliding pattern id
        first_file: Source that registered the id first
        second_file: Source that tried to register it again
    """

    def __init__(self, pattern_id: str, first_file: str, second_file: str) -> None:
        """Initialize the collision error.

        Args:
            pattern_id: The colliding pattern id
            first_file: Source that registered the id first
            second_file: Source that tried to register it again
        """
        super().__init__(
            f"Duplicate pattern id '{pattern_id}' in {second_file}; "
            f"already defined by {first_file}",
            {"id": pattern_id, "first_file": first_file, "second_file": second_file},
        )
        self.pattern_id = pattern_id
        self.first_file = first_file
        self.second_file = second_file


class NoSvgFilesError(BuildError):
    """Raised when the input directory holds no SVG files.

    Example:
        raise NoSvgFilesError("No SVG files found", {"directory": "svgs"})
    """
    pass


class WarningsPresentError(BuildError):
    """Raised in strict mode when any diagnostic was collected.

    Attributes:
        diagnostics: Every diagnostic collected across all files
    """

    def __init__(self, diagnostics: list[Any]) -> None:
        """Initialize with the full list of collected diagnostics.

        Args:
            diagnostics: Every diagnostic collected across all files
        """
        super().__init__(
            f"Aborting due to {len(diagnostics)} warning(s) in strict mode",
            {"count": len(diagnostics)},
        )
        self.diagnostics = diagnostics


# I/O Exceptions
class SpriteIOError(SvgSheetError):
    """Base exception for file system errors during a build."""
    pass


class InputDirectoryError(SpriteIOError):
    """Raised when the input directory cannot be listed.

    Example:
        raise InputDirectoryError(
            "Failed to read input directory",
            {"directory": "svgs", "error": "No such file or directory"}
        )
    """
    pass


class SourceReadError(SpriteIOError):
    """Raised when a source file cannot be read or decoded.

    Example:
        raise SourceReadError(
            "Failed to read source file",
            {"file": "svgs/arrow.svg", "error": "Permission denied"}
        )
    """
    pass


class OutputWriteError(SpriteIOError):
    """Raised when the sprite cannot be written to its destination.

    Example:
        raise OutputWriteError(
            "Failed to write sprite",
            {"path": "sprite.svg", "error": "Read-only file system"}
        )
    """
    pass


# Utility function for exception chaining
def chain_exception(new_exception: SvgSheetError, cause: Exception) -> SvgSheetError:
    """Chain a new exception with its underlying cause.

    Args:
        new_exception: The new domain-specific exception to raise
        cause: The underlying exception that caused this error

    Returns:
        The new exception with cause properly chained

    Example:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise chain_exception(
                SourceReadError("Failed to read source file", {"file": str(path)}),
                e
            )
    """
    new_exception.__cause__ = cause
    return new_exception

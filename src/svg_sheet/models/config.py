"""Configuration models for svg-sheet.

Defines Pydantic models for the build, watch and logging settings. Values come
from an optional YAML file and are then overridden by command line flags.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from svg_sheet.constants import (
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_INPUT_DIRECTORY,
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_POLL_INTERVAL_MS,
    MILLISECONDS_PER_SECOND,
    MIN_DEBOUNCE_MS,
    VALID_LOG_FORMATS,
    VALID_LOG_LEVELS,
)


def _normalize_path(path: str | Path) -> Path:
    """Convert a string path to a Path object.

    Args:
        path: String or Path object

    Returns:
        A Path object.
    """
    return Path(path) if isinstance(path, str) else path


class BuildConfig(BaseModel):
    """Sprite build configuration."""

    directory: Path = Path(DEFAULT_INPUT_DIRECTORY)
    output: Path = Path(DEFAULT_OUTPUT_FILE)
    strict: bool = False  # Warnings become fatal after all files are scanned
    dry_run: bool = False  # Run the full pipeline but leave the output untouched


class WatchConfig(BaseModel):
    """Watch mode configuration."""

    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS

    @field_validator("debounce_ms")
    @classmethod
    def validate_debounce(cls, v: int) -> int:
        """Validate the debounce interval is not negative.

        Args:
            v: The debounce interval in milliseconds.

        Returns:
            The validated debounce interval.

        Raises:
            ValueError: If the interval is negative.
        """
        if v < 0:
            raise ValueError("Debounce interval must be zero or positive")
        return v

    @field_validator("poll_interval_ms")
    @classmethod
    def validate_poll_interval(cls, v: int) -> int:
        """Validate the poll interval is positive.

        Args:
            v: The poll interval in milliseconds.

        Returns:
            The validated poll interval.

        Raises:
            ValueError: If the interval is not positive.
        """
        if v <= 0:
            raise ValueError("Poll interval must be positive")
        return v

    @property
    def debounce_seconds(self) -> float:
        """Debounce interval in seconds; zero is raised to the minimum."""
        return max(self.debounce_ms, MIN_DEBOUNCE_MS) / MILLISECONDS_PER_SECOND

    @property
    def poll_interval_seconds(self) -> float:
        """Poll interval in seconds."""
        return self.poll_interval_ms / MILLISECONDS_PER_SECOND


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = DEFAULT_LOG_LEVEL
    file: str | None = None
    format: str = "text"
    max_size_mb: int = 5
    backup_count: int = 3

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate the log level name.

        Args:
            v: The log level name, in any case.

        Returns:
            The upper-cased log level name.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        level = v.upper()
        if level == "WARN":
            level = "WARNING"
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {', '.join(VALID_LOG_LEVELS)}")
        return level

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate the log output format.

        Args:
            v: The format name.

        Returns:
            The validated format name.

        Raises:
            ValueError: If the format is not supported.
        """
        if v.lower() not in VALID_LOG_FORMATS:
            raise ValueError(f"Log format must be one of: {', '.join(VALID_LOG_FORMATS)}")
        return v.lower()


class AppConfig(BaseModel):
    """Main application configuration."""

    build: BuildConfig = Field(default_factory=BuildConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "AppConfig":
        """Load configuration from YAML file.

        Args:
            config_path: Path to the YAML configuration file. Can be a string path
                or a Path object.

        Returns:
            An initialized AppConfig object with values from the YAML file. An
            empty file yields the defaults.

        Raises:
            FileNotFoundError: If the specified config file doesn't exist.
            yaml.YAMLError: If the YAML file has invalid syntax.
            ValidationError: If the configuration values don't match the expected schema.
        """
        import yaml

        from svg_sheet.utils.file_utils import read_text

        path = _normalize_path(config_path)

        yaml_content = read_text(path)
        config_data = yaml.safe_load(yaml_content) or {}

        return cls.model_validate(config_data)

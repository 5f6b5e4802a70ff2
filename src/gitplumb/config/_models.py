"""Configuration models.

This module provides the Pydantic models for gitplumb settings. All models
are frozen and ignore unknown keys so that newer config files load on older
releases.
"""

from enum import StrEnum
from pathlib import Path
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gitplumb.exceptions import ConfigError


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty logs to standard error).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.TEXT
    file: str = ""


class GitConfig(BaseModel):
    """Store tool configuration section.

    Attributes:
        executable: Executable name or path, resolved on PATH once per handle.
        metadata_dir: Name of the metadata directory inside the working directory.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    executable: str = Field(default="git", min_length=1)
    metadata_dir: str = Field(default=".git", min_length=1)


class PolicyConfig(BaseModel):
    """Operation policy section.

    Operations disabled here raise ForbiddenOperationError before any
    process is spawned.

    Attributes:
        allow_bare_init: Permit creating bare repositories.
        allow_unstage: Permit removing paths from the index with `rm --cached`.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    allow_bare_init: bool = False
    allow_unstage: bool = False


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        debug: Echo every command line to the handle's debug stream.
        git: Store tool settings.
        policy: Operation policy.
        logging: Logging settings.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    debug: bool = False
    git: GitConfig = Field(default_factory=GitConfig)
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:  # pyright: ignore[reportExplicitAny]
        """Build a Config from a merged configuration dictionary.

        Args:
            data: Nested configuration values.

        Returns:
            The validated Config.

        Raises:
            ConfigError: If any value fails validation.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigError(msg) from e

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Build a Config from a single TOML file.

        Args:
            path: Path to the TOML file.

        Returns:
            The validated Config.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigError: If any value fails validation.
        """
        from gitplumb.config._loader import read_toml_file  # noqa: PLC0415

        return cls.from_dict(read_toml_file(path))

"""
Logging Configuration.

Values come from keyword arguments, ``TEELOG_*`` environment variables
or a ``.env`` file, in that order of precedence.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .levels import Level


class LogSettings(BaseSettings):
    """Configuration of one teelog logger.

    Instances are mutable and re-validated on assignment. Changes take
    effect only when the settings are passed to ``initialize`` (or
    ``Logger.from_settings``) again.
    """

    model_config = SettingsConfigDict(
        env_prefix="TEELOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    file_name: str = Field(default="log", min_length=1, description="Log file name stem")
    level: Level = Field(default=Level.DEBUG, description="Minimum level written anywhere")
    max_age: int = Field(default=20, ge=0, description="Days to keep rotated files (0 keeps them forever)")
    local_time: bool = Field(default=True, description="Use local time instead of UTC for timestamps")
    log_dir: str = Field(default="logs", description="Directory holding the log files")
    max_size: int = Field(default=100, gt=0, description="Megabytes written before a file is rotated")
    max_backups: int = Field(default=0, ge=0, description="Rotated files to keep (0 keeps all)")
    color: bool = Field(default=True, description="Colorize level names on the console")
    development: bool = Field(default=False, description="Raise Panic from dpanic calls")

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Level:
        return Level.parse(value)

    @property
    def file_path(self) -> Path:
        return Path(self.log_dir) / f"{self.file_name}.log"

    @property
    def error_file_path(self) -> Path:
        return Path(self.log_dir) / f"{self.file_name}_err.log"

    def merged(self, **overrides: Any) -> LogSettings:
        """Return a validated copy with ``overrides`` applied.

        Raises:
            ConfigurationError: if an override is invalid.
        """
        if not overrides:
            return self
        try:
            return type(self).model_validate({**self.model_dump(), **overrides})
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

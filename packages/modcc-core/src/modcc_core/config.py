"""Build configuration for modcc.

Settings can be loaded from environment variables with the MODCC_ prefix
(or a local .env file) and overridden explicitly, e.g. by CLI options.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from modcc_core.models import DEFAULT_FORMATS, EntryPointFormat

CORE_PACKAGE_NAME = "@angular/core"
"""Name of the distinguished core runtime entry point."""


class BuildSettings(BaseSettings):
    """Configuration for a build run.

    Example:
        >>> # From environment (MODCC_SOURCE, MODCC_FORMATS='["esm2015"]', ...)
        >>> settings = BuildSettings()
        >>>
        >>> # Explicit
        >>> settings = BuildSettings(source=Path("node_modules"), formats=["esm2015"])
        >>> settings.target_root == settings.source_root
        True
    """

    model_config = SettingsConfigDict(
        env_prefix="MODCC_",
        env_file=".env",
        extra="ignore",
    )

    source: Path = Field(
        default=Path("./node_modules"),
        description="Root folder containing the packages to compile",
    )
    target: Path | None = Field(
        default=None,
        description="Root folder where compiled files are written (defaults to source)",
    )
    formats: tuple[EntryPointFormat, ...] = Field(
        default=DEFAULT_FORMATS,
        min_length=1,
        description="Formats to compile, in processing order",
    )
    core_package_name: str = Field(
        default=CORE_PACKAGE_NAME,
        min_length=1,
        description="Entry point that receives core-specific transform handling",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer",
    )

    @field_validator("formats", mode="before")
    @classmethod
    def split_and_dedupe_formats(cls, v: Any) -> Any:
        """Accept comma-separated strings and drop repeated formats."""
        if isinstance(v, str):
            v = [part.strip() for part in v.split(",") if part.strip()]
        if isinstance(v, (list, tuple)):
            return tuple(dict.fromkeys(v))
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: Any) -> Any:
        """Normalize log level casing."""
        return v.upper() if isinstance(v, str) else v

    @property
    def source_root(self) -> Path:
        """Absolute source root."""
        return self.source.resolve()

    @property
    def target_root(self) -> Path:
        """Absolute target root, falling back to the source root."""
        return (self.target or self.source).resolve()

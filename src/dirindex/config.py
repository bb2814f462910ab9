"""Configuration for the dirindex server.

Values come from (highest first): explicit overrides passed to
``Settings.load()`` (CLI flags), ``DIRINDEX_*`` environment variables, a
``.env`` file in the working directory, then the defaults below.

Created: 2026-10-15
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import DirectoryPath, Field, FilePath, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """dirindex settings."""

    model_config = SettingsConfigDict(
        env_prefix="DIRINDEX_",
        env_file=".env",
        extra="ignore",
    )

    # Document root
    root: Path = Field(default=Path("."), description="Directory to serve")
    follow_symlink: bool = Field(
        default=False, description="Serve files behind symlinks pointing outside the root"
    )

    # Index page
    templates_dir: DirectoryPath | None = Field(
        default=None, description="Template directory containing index.html"
    )
    template_file: FilePath | None = Field(
        default=None, description="Single template file used as the index page"
    )
    hide_hidden: bool = Field(default=False, description="Hide dotfiles from listings")

    # HTTP server
    host: str = Field(default="127.0.0.1", description="Host to bind")
    port: int = Field(default=8888, ge=1, le=65535, description="Port to bind")
    mount_path: str = Field(default="/", description="URL prefix the root is served under")

    log_level: str = Field(default="INFO", description="Log level")

    @field_validator("mount_path")
    @classmethod
    def _normalize_mount_path(cls, value: str) -> str:
        return "/" + value.strip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _one_template_source(self) -> Settings:
        if self.templates_dir is not None and self.template_file is not None:
            raise ValueError("templates_dir and template_file are mutually exclusive")
        return self

    @classmethod
    def load(cls, **overrides: Any) -> Settings:
        """Load settings, applying the non-None ``overrides`` on top."""
        return cls(**{key: value for key, value in overrides.items() if value is not None})

    def template_source(self) -> str | None:
        """Text of ``template_file``, if one is configured."""
        if self.template_file is None:
            return None
        return self.template_file.read_text(encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (cached)."""
    return Settings.load()

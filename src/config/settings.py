# src/config/settings.py - v1
"""Typed configuration loaded from .env via pydantic-settings.

Process-level settings shared by every document of a build run. Per-run
rewrite options live in config/options.py.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Build ===
    product: str = "default"
    template_extensions: str = "html,htm,tpl,vm"

    # === Resolution adapter ===
    # Dotted import path ("pkg.module:function"), used when run options carry none.
    adapter: str = ""

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["memory", "json", "sqlite", "redis"] = "json"
    cache_root: Path = Path("~/.cdnrewrite/cache")
    cache_redis_url: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("template_extensions")
    @classmethod
    def validate_template_extensions(cls, v: str) -> str:  # noqa: N805
        """Template extensions are stored lower-case without dots."""
        return ",".join(
            e.strip().lstrip(".").lower() for e in v.split(",") if e.strip()
        )

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_REDIS_URL must be set when CACHE_BACKEND=redis")

        if self.log_retention < 0:
            errors.append("LOG_RETENTION must be >= 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def template_extensions_list(self) -> list[str]:
        """Parse comma-separated template extensions."""
        return [e for e in self.template_extensions.split(",") if e]

    @property
    def cache_namespace(self) -> str:
        """Logical cache group shared by every document of this product."""
        return f"{self.product or 'default'}/cdn"


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-build config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]

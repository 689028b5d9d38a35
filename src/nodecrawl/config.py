"""Configuration management for nodecrawl."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nodecrawl.logging_utils import configure_logging


class EngineSettings(BaseSettings):
    """Engine settings."""

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_profile: Literal["default", "chat"] = Field(default="default", description="Log output profile")

    # Crawl Configuration
    max_hops: int | None = Field(
        default=None,
        ge=1,
        description="Upper bound on unit invocations per walk; unset means unbounded",
    )
    record_summaries: bool = Field(default=True, description="Register the loguru summary recorder")

    model_config = SettingsConfigDict(
        env_prefix="NODECRAWL_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def load_settings(*, configure_logs: bool = False, **overrides: Any) -> EngineSettings:
    """Load settings from the environment, then apply explicit overrides.

    Args:
        configure_logs: Also install the loguru sink described by the settings
        **overrides: Field values that win over the environment; None is ignored

    Returns:
        EngineSettings instance
    """
    settings = EngineSettings()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        settings = settings.model_copy(update=updates)

    if configure_logs:
        configure_logging(profile=settings.log_profile, level=settings.log_level)

    return settings

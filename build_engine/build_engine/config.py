"""Build engine configuration loaded from environment variables."""

from __future__ import annotations

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Controller settings loaded from environment variables with BUILD_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="BUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    debug: bool = False
    structured_logging: bool = False

    # Source step images
    git_container_image: str = "ghcr.io/shipwright-io/build/git:latest"
    git_container_command: str = "/ko-app/git"
    remote_artifacts_image: str = "quay.io/quay/busybox:latest"

    # Pipeline layout
    source_root: str = "/workspace/source"
    result_prefix: str = "shp"

    # Validation
    repository_probe_timeout: float = 10.0
    validation_timeout: float | None = 30.0

    # Requeue
    requeue_max_retries: int = 5
    requeue_base_delay: float = 1.0
    requeue_max_delay: float = 60.0

    @field_validator("result_prefix")
    @classmethod
    def strip_prefix_separator(cls, v: str) -> str:
        v = v.strip().rstrip("-")
        if not v:
            raise ValueError("result_prefix must not be empty")
        return v


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info(
            "Loaded settings: git image %s, result prefix %s",
            settings.git_container_image,
            settings.result_prefix,
        )

    return settings

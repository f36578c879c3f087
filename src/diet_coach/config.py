"""Application configuration."""

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    fcm_project_id: str
    fcm_access_token: str
    fcm_base_url: str = "https://fcm.googleapis.com/v1"
    log_timezone: str = "UTC"
    history_days: int = 7
    active_user_days: int = 3
    recommendation_concurrency: int = 3
    notification_concurrency: int = 10
    recommendation_batch_limit: int | None = 10
    batch_target_timeout_seconds: float | None = 60.0
    recommendation_max_age_hours: int = 24
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("log_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        if not is_valid_timezone(value):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @field_validator("recommendation_concurrency", "notification_concurrency")
    @classmethod
    def _check_concurrency(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Concurrency must be at least 1")
        return value


def is_valid_timezone(value: str) -> bool:
    """Return True when the value names a known IANA timezone."""
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True

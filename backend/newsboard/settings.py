"""Settings for the newsboard backend."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_field(default, *env_names: str):
    if env_names:
        alias = AliasChoices(*env_names) if len(env_names) > 1 else env_names[0]
        return Field(default=default, validation_alias=alias)
    return Field(default=default)


class Settings(BaseSettings):
    redis_url: str = _env_field("redis://localhost:6379/0", "REDIS_URL")
    site_name: str = _env_field("Newsboard", "SITE_NAME")

    environment: str = _env_field("production", "ENV", "APP_ENV", "ENVIRONMENT")
    obs_enabled: bool = _env_field(True, "OBS_ENABLED")
    obs_metrics_public: bool = _env_field(False, "OBS_METRICS_PUBLIC")
    obs_log_level: str = _env_field("INFO", "LOG_LEVEL")
    obs_log_sampling_rate_info: float = _env_field(1.0, "LOG_SAMPLING_RATE_INFO")
    service_name: str = _env_field("newsboard-api", "SERVICE_NAME")
    git_commit: str = _env_field("unknown", "GIT_COMMIT", "COMMIT_SHA", "SOURCE_VERSION")
    admin_token: Optional[str] = _env_field(None, "ADMIN_TOKEN", "OBS_ADMIN_TOKEN")

    # Listing page sizes ("show more" pagination)
    top_news_per_page: int = _env_field(30, "TOP_NEWS_PER_PAGE")
    latest_news_per_page: int = _env_field(100, "LATEST_NEWS_PER_PAGE")
    saved_news_per_page: int = _env_field(10, "SAVED_NEWS_PER_PAGE")

    # Rank recompute job
    recompute_batch_size: int = _env_field(500, "RECOMPUTE_BATCH_SIZE")
    recompute_interval_seconds: int = _env_field(3600, "RECOMPUTE_INTERVAL_SECONDS")
    rank_workers_enabled: bool = _env_field(False, "RANK_WORKERS_ENABLED")

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("top_news_per_page", "latest_news_per_page", "saved_news_per_page", "recompute_batch_size")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    def is_prod(self) -> bool:
        return self.environment.lower() in ("prod", "production", "live")

    def is_dev(self) -> bool:
        return self.environment.lower() in ("dev", "development")


def _normalise_level(level: str) -> str:
    return level.upper()


settings = Settings()
settings.obs_log_level = _normalise_level(settings.obs_log_level)

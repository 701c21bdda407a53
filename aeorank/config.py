"""Audit configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Audit settings loaded from environment variables (prefix ``AEORANK_``)."""

    model_config = SettingsConfigDict(
        env_prefix="AEORANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"
    json_logs: bool = False

    # HTTP
    user_agent: str = "AEO-Visibility-Bot/1.0"
    fetch_timeout: float = 15.0  # seconds, acquisition fetches
    page_timeout: float = 10.0  # seconds, discovered pages
    max_body_chars: int = 500_000

    # Headless rendering
    headless_enabled: bool = True
    headless_timeout: float = 25.0  # seconds, navigation
    headless_content_wait: float = 5.0  # seconds, waiting for body text
    spa_text_threshold: int = 500  # visible chars at which a page is never a shell

    # Sampling
    multi_page_enabled: bool = True
    blog_sample_limit: int = 10
    content_page_limit: int = 6
    min_page_chars: int = 500  # sampled bodies must be longer than this

    # Content velocity
    velocity_window_days: int = 90
    uniform_lastmod_share: float = 0.8
    uniform_lastmod_min_sample: int = 5

    @property
    def is_production(self) -> bool:
        return self.env == "production" or self.json_logs


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

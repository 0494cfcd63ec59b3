"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database (in-process; state is gone when the process exits)
    database_url: str = "sqlite+aiosqlite:///:memory:"
    seed_sample_data: bool = True

    # Security
    secret_key: str = "change-this-in-production-minimum-32-characters-long"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours
    access_code_length: int = 10

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # API Settings
    api_v1_prefix: str = "/api/v1"
    project_name: str = "Unit Portal"
    version: str = "1.0.0"

    # Rate limiting
    rate_limit_login_per_minute: int = 10  # per IP, slows access-code guessing
    rate_limit_api_per_minute: int = 120   # per member or IP for general API
    rate_limit_enabled: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Configuration settings for the Learning Plans service."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Application
    app_name: str = "Learning Plans Service"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Primary store
    # Default to Postgres; tests override via LP_DB_URL
    db_url: str = "postgresql+asyncpg://localhost/learning_plans"
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # Resource catalog (read-only, aggregated elsewhere)
    resource_db_url: Optional[str] = None

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    resource_cache_enabled: bool = False
    resource_cache_ttl: int = 300  # seconds

    # Identity provider
    identity_userinfo_url: str = "https://openidconnect.googleapis.com/v1/userinfo"
    identity_timeout: float = 10.0

    # Session tokens
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "learning-plans"
    jwt_audience: str = "learning-plans"
    session_ttl_seconds: int = 60 * 60 * 24 * 30

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Rate Limiting
    rate_limit_requests: int = 60
    rate_limit_window: int = 60  # seconds

    # Search
    plan_search_limit: Optional[int] = None
    resource_page_size: int = 50
    resource_picker_size: int = 10

    @property
    def resource_store_url(self) -> str:
        return self.resource_db_url or self.db_url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

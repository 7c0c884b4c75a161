from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    APP_ENV: str = "local"

    # Idea store
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: SecretStr | None = None

    # LLM
    ANTHROPIC_API_KEY: SecretStr | None = None
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    LLM_MAX_TOKENS: int = 2000
    LLM_BATCH_MAX_TOKENS: int = 3000

    # Ranked listing feed
    PRODUCT_HUNT_API_TOKEN: SecretStr | None = None
    PRODUCT_HUNT_API_URL: str = "https://api.producthunt.com/v2/api/graphql"
    LAUNCHES_PER_DAY: int = Field(3, ge=1, le=20)

    HTTP_TIMEOUT_SECONDS: float = 15.0

    # Blob store
    R2_ACCOUNT_ID: str | None = None
    R2_ACCESS_KEY_ID: str | None = None
    R2_SECRET_ACCESS_KEY: SecretStr | None = None
    R2_BUCKET_NAME: str | None = None

    FRONTEND_CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "POS API"
    ENVIRONMENT: str = "local"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = Field(
        default="sqlite:///./pos.db",
        validation_alias=AliasChoices("DATABASE_URL", "DB_CONN"),
    )
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE_SECONDS: int = 300
    DB_CONNECT_TIMEOUT: int = 10
    DB_STATEMENT_TIMEOUT_MS: Optional[int] = None
    DB_FORCE_IPV4: bool = False

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_SQL: bool = False


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]

"""
Application Configuration

Centralized settings management using Pydantic BaseSettings.
All values are loaded from environment variables or .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable binding.

    Connection env vars (ignored when DATABASE_URL is set):
        POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_HOST (localhost), POSTGRES_DB

    Optional env vars:
        POSTGRES_PORT (5432), DATABASE_URL, DB_POOL_SIZE (10),
        DB_MAX_OVERFLOW (10), DB_POOL_RECYCLE_SECONDS (1800),
        DB_POOL_TIMEOUT_SECONDS (30), DB_COMMAND_TIMEOUT_SECONDS (30),
        REQUEST_TIMEOUT_SECONDS (10), AUTO_CREATE_SCHEMA (False),
        LOG_LEVEL (INFO)
    """

    PROJECT_NAME: str = "Notes API"

    # Database
    POSTGRES_USER: str = ""
    POSTGRES_PASSWORD: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = ""
    # Full DSN from DATABASE_URL wins over the POSTGRES_* parts
    DATABASE_URL_OVERRIDE: str | None = Field(
        default=None, validation_alias="DATABASE_URL"
    )

    # Connection pool: pool_size + max_overflow bounds open connections
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE_SECONDS: int = 1800
    DB_POOL_TIMEOUT_SECONDS: float = 30.0
    DB_COMMAND_TIMEOUT_SECONDS: float = 30.0

    # Per-operation deadline applied by the repository
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # Create tables and indexes on startup (dev/test bootstrap only)
    AUTO_CREATE_SCHEMA: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",  # Silently ignore unknown env vars
    )

    @property
    def DATABASE_URL(self) -> str:
        """Async PostgreSQL connection string using asyncpg driver."""
        if self.DATABASE_URL_OVERRIDE:
            return normalize_async_url(self.DATABASE_URL_OVERRIDE)
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


def normalize_async_url(url: str) -> str:
    """Rewrite plain ``postgres://``/``postgresql://`` URLs to the asyncpg driver."""
    for prefix in ("postgresql+asyncpg://", "postgresql://", "postgres://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix) :]
    return url


settings = Settings()

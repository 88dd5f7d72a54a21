# presant/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables (or a local `.env` file)
    at runtime.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Presant Attendance"
    APP_ENV: str = Field("local", description="Environment name: local/test/dev/stage/prod")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./presant.db",
        description="SQLAlchemy-compatible database URL",
    )

    APP_TIMEZONE: str = Field(
        "UTC",
        description=(
            "IANA timezone used to decide what 'today' is. Every recurrence "
            "check compares calendar dates in this single timezone."
        ),
    )

    LOG_LEVEL: str = Field(
        "INFO",
        description="Level of the `presant` loggers (DEBUG/INFO/WARNING/ERROR).",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Settings are read and validated only once per process.
    """
    return Settings()

# hoozin/core/config.py
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

    APP_NAME: str = "Hoozin"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./hoozin.db",
        description="SQLAlchemy-compatible database URL backing the key/value store",
    )

    LOG_LEVEL: str = Field("INFO", description="Root log level.")
    LOG_FORMAT: str = Field("text", description="Log output format: text or json.")

    # --- Response cache ---
    CACHE_TTL_SECONDS: int = Field(
        default=300,
        description="Default time-to-live for cached upstream responses.",
    )
    STORAGE_QUOTA_CHARS: int | None = Field(
        default=5 * 1024 * 1024,
        description=(
            "Upper bound on the total characters of persisted keys and values. "
            "A write that would exceed it evicts the whole response cache."
        ),
    )

    # --- Google APIs ---
    GOOGLE_PEOPLE_BASE_URL: str = "https://people.googleapis.com"
    GOOGLE_CALENDAR_BASE_URL: str = "https://www.googleapis.com/calendar/v3"
    CALENDAR_TIME_ZONE: str = Field(
        "Europe/Oslo",
        description="Time zone passed to the calendar events listing call.",
    )
    PEOPLE_PAGE_SIZE: int = 100
    EVENTS_MAX_RESULTS: int = 100
    ROOM_EVENTS_MAX_RESULTS: int = 10
    HTTP_TIMEOUT_SECONDS: float = 10.0

    WORKING_DAYS_WINDOW: int = Field(
        default=5,
        description="Number of working days shown by default.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()

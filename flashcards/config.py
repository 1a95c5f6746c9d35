"""Application configuration management."""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    PROJECT_NAME: str = "Spanish Flashcards"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = Field("INFO", description="Minimum level for the loguru stderr sink")

    DATABASE_URL: str = Field(
        "sqlite:///./flashcards.db",
        description="SQLAlchemy database URL",
    )

    REDIS_URL: Optional[AnyUrl] = Field(
        None, description="Optional Redis connection string for the lookup cache"
    )

    BACKEND_CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost", "http://localhost:5173"],
        description="Allowed CORS origins",
    )

    WORD_LIST_PATH: Path = Field(
        Path("public/scrapedSpan411.json"),
        description="Versioned word list used to bootstrap the local store",
    )
    AUTO_CREATE_TABLES: bool = Field(
        True, description="Create missing tables when the API starts (SQLite development)"
    )
    BOOTSTRAP_ON_STARTUP: bool = Field(
        True, description="Sync WORD_LIST_PATH into the store when the API starts"
    )

    TATOEBA_API_BASE: str = Field(
        "https://tatoeba.org/api_v0", description="Example sentence search API"
    )
    CONJUGATION_API_BASE: str = Field(
        "http://verbe.cc/verbecc", description="Verb conjugation API"
    )
    HTTP_TIMEOUT_SECONDS: float = Field(10.0, description="Timeout for external lookups")
    HTTP_MAX_RETRIES: int = Field(3, description="Retry attempts for failed external lookups")
    LOOKUP_CACHE_TTL_SECONDS: int = Field(86400, description="Cache lifetime of external lookups")

    # Game tuning
    MATCHING_PAIRS: int = Field(6, description="Pairs shown per matching round")
    FILL_IN_BLANK_CHOICES: int = Field(4, description="Choices offered per blank")
    FILL_IN_BLANK_MAX_WORDS: int = Field(
        3, description="Longest phrase (in words) that fits a sentence blank"
    )
    QUESTION_MAX_ATTEMPTS: int = Field(
        15, description="Random targets tried before giving up on a question"
    )
    CONJUGATION_ROUND_LENGTH: int = Field(10, description="Questions per conjugation game")
    DEFAULT_LIST_SIZE: int = Field(20, description="Default size of generated study lists")

    SESSION_INACTIVITY_MINUTES: int = Field(
        30, description="Idle time after which answer stats start a new session"
    )

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parent.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


settings = get_settings()

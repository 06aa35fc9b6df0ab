"""Pipeline configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, RedisDsn, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pipeline.exceptions import ConfigError

# Default sentiment lexicon
DEFAULT_POSITIVE_WORDS = [
    "good",
    "great",
    "excellent",
    "amazing",
    "wonderful",
    "fantastic",
    "happy",
    "joy",
    "love",
    "perfect",
    "beautiful",
    "nice",
    "best",
    "positive",
    "success",
    "win",
    "pleasure",
    "delight",
    "brilliant",
]

DEFAULT_NEGATIVE_WORDS = [
    "bad",
    "terrible",
    "awful",
    "horrible",
    "hate",
    "angry",
    "sad",
    "unhappy",
    "disappointing",
    "poor",
    "worst",
    "negative",
    "failure",
    "lose",
    "problem",
    "issue",
    "wrong",
    "broken",
]


class Settings(BaseSettings):
    """Pipeline settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"

    # Queue service
    queue_backend: Literal["redis", "memory"] = "redis"
    redis_url: RedisDsn = Field(default="redis://localhost:6379/0", validate_default=True)
    task_queue: str = "task_queue"
    result_queue: str = "result_queue"
    consume_timeout_seconds: float = 5.0  # Blocking receive, then poll again

    # Wire format
    wire_format: Literal["delimited", "tagged"] = "delimited"

    # Analysis
    redaction_token: str = "FFFFF"
    positive_words: list[str] = Field(default_factory=lambda: list(DEFAULT_POSITIVE_WORDS))
    negative_words: list[str] = Field(default_factory=lambda: list(DEFAULT_NEGATIVE_WORDS))
    sentiment_threshold: float = 0.1

    # Reports
    report_dir: str = "."
    report_filename: str = "report.txt"
    sorted_text_filename: str = "sorted_text.txt"
    processed_text_filename: str = "processed_text.txt"

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test mode."""
        return self.env == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings()
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise ConfigError(f"Invalid settings: {fields or e}") from e

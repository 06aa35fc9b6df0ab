"""Pytest configuration and fixtures."""

import os

import pytest

# Set test environment before any pipeline code runs
os.environ["ENV"] = "test"
os.environ["QUEUE_BACKEND"] = "memory"
os.environ["REDIS_URL"] = "redis://localhost:6379/0"

from pipeline.config import Settings, get_settings  # noqa: E402
from pipeline.models import SectionResult, SentimentLabel  # noqa: E402
from pipeline.queue import MemoryQueueService  # noqa: E402


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Never reuse settings across tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Test settings writing reports into a temporary directory."""
    return Settings(
        env="test",
        queue_backend="memory",
        consume_timeout_seconds=0.05,
        report_dir=str(tmp_path),
    )


@pytest.fixture
def memory_queue() -> MemoryQueueService:
    """Fresh in-memory queue service."""
    return MemoryQueueService()


@pytest.fixture
def make_result():
    """Factory for section results with sensible defaults."""

    def _make(
        section_id: int,
        word_count: int = 5,
        top_words: tuple[tuple[str, int], ...] = (),
        label: SentimentLabel = SentimentLabel.NEUTRAL,
        score: float = 0.0,
        redacted_text: str = "",
        ranked_sentences: tuple[str, ...] = (),
    ) -> SectionResult:
        return SectionResult(
            section_id=section_id,
            word_count=word_count,
            top_words=top_words,
            sentiment_label=label,
            sentiment_score=score,
            redacted_text=redacted_text,
            ranked_sentences=ranked_sentences,
        )

    return _make

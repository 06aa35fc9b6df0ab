"""Domain models shared by the producer, workers and aggregator."""

from dataclasses import dataclass
from enum import Enum


class SentimentLabel(str, Enum):
    """Polarity label assigned to a section."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Section:
    """A contiguous group of sentences, the unit of distributed work."""

    id: int
    text: str


@dataclass(frozen=True)
class Sentiment:
    """Lexicon sentiment score with its label."""

    label: SentimentLabel
    score: float


@dataclass(frozen=True)
class SectionResult:
    """Analysis output for one section."""

    section_id: int
    word_count: int
    top_words: tuple[tuple[str, int], ...] = ()  # Count-descending
    sentiment_label: SentimentLabel = SentimentLabel.NEUTRAL
    sentiment_score: float = 0.0
    redacted_text: str = ""
    ranked_sentences: tuple[str, ...] = ()  # Longest first

    @property
    def names_replaced(self) -> int:
        """Length of the redacted text, as announced on the wire."""
        return len(self.redacted_text)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "section_id": self.section_id,
            "word_count": self.word_count,
            "top_words": [[word, count] for word, count in self.top_words],
            "sentiment_label": self.sentiment_label.value,
            "sentiment_score": self.sentiment_score,
            "redacted_text": self.redacted_text,
            "ranked_sentences": list(self.ranked_sentences),
        }

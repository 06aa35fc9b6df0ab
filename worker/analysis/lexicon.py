"""Fixed sentiment lexicon."""

from dataclasses import dataclass

from pipeline.config import DEFAULT_NEGATIVE_WORDS, DEFAULT_POSITIVE_WORDS, Settings


@dataclass(frozen=True)
class SentimentLexicon:
    """Immutable positive/negative word sets used for polarity scoring."""

    positive: frozenset[str]
    negative: frozenset[str]
    threshold: float = 0.1  # |score| above this is polar

    @classmethod
    def from_words(
        cls,
        positive: list[str],
        negative: list[str],
        threshold: float = 0.1,
    ) -> "SentimentLexicon":
        """Build a lexicon, lower-casing every word."""
        return cls(
            positive=frozenset(w.lower() for w in positive),
            negative=frozenset(w.lower() for w in negative),
            threshold=threshold,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SentimentLexicon":
        """Build the lexicon configured in settings."""
        return cls.from_words(
            settings.positive_words,
            settings.negative_words,
            threshold=settings.sentiment_threshold,
        )


DEFAULT_LEXICON = SentimentLexicon.from_words(DEFAULT_POSITIVE_WORDS, DEFAULT_NEGATIVE_WORDS)

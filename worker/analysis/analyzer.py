"""Section analyzer combining the per-section text analyses."""

from dataclasses import dataclass, field

import structlog

from pipeline.config import Settings
from pipeline.models import Section, SectionResult
from worker.analysis.lexicon import DEFAULT_LEXICON, SentimentLexicon
from worker.analysis.text import (
    DEFAULT_REDACTION_TOKEN,
    analyze_sentiment,
    count_words,
    rank_sentences,
    redact_names,
    top_words,
)

logger = structlog.get_logger(__name__)


@dataclass
class AnalyzerConfig:
    """Configuration for section analysis."""

    top_k: int = 10  # Words reported per section
    lexicon: SentimentLexicon = field(default_factory=lambda: DEFAULT_LEXICON)
    redaction_token: str = DEFAULT_REDACTION_TOKEN

    @classmethod
    def from_settings(cls, settings: Settings, top_k: int) -> "AnalyzerConfig":
        """Build analyzer configuration from settings and the CLI top-k."""
        return cls(
            top_k=top_k,
            lexicon=SentimentLexicon.from_settings(settings),
            redaction_token=settings.redaction_token,
        )


class TextAnalyzer:
    """Runs every analysis over one section. Holds no per-section state."""

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()

    def analyze(self, section: Section) -> SectionResult:
        """
        Analyze a section.

        Args:
            section: Section to analyze

        Returns:
            The immutable result for the section
        """
        text = section.text
        sentiment = analyze_sentiment(text, self.config.lexicon)

        result = SectionResult(
            section_id=section.id,
            word_count=count_words(text),
            top_words=tuple(top_words(text, self.config.top_k)),
            sentiment_label=sentiment.label,
            sentiment_score=sentiment.score,
            redacted_text=redact_names(text, self.config.redaction_token),
            ranked_sentences=tuple(rank_sentences(text)),
        )

        logger.debug(
            "section_analyzed",
            section_id=section.id,
            word_count=result.word_count,
            sentiment=result.sentiment_label.value,
        )
        return result

"""Corpus state machine for the aggregator.

Results and the section count announcement share one queue with no
ordering guarantee, so the count may arrive before, between or after
the results. The state machine moves

    AWAITING_EXPECTED_COUNT -> COLLECTING -> COMPLETE

and COMPLETE is terminal. Results that arrive before the count are
kept.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import structlog

from pipeline.models import SectionResult, SentimentLabel

logger = structlog.get_logger(__name__)


class AggregatorPhase(str, Enum):
    """Aggregator lifecycle phases."""

    AWAITING_EXPECTED_COUNT = "awaiting_expected_count"
    COLLECTING = "collecting"
    COMPLETE = "complete"


@dataclass(frozen=True)
class SentimentSummary:
    """Corpus-level sentiment: mean section score and sections per label."""

    average: float
    positive: int
    negative: int
    neutral: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "average": self.average,
            "positive": self.positive,
            "negative": self.negative,
            "neutral": self.neutral,
        }


def merge_top_words(
    word_lists: Iterable[Iterable[tuple[str, int]]],
    top_n: int | None = None,
) -> list[tuple[str, int]]:
    """
    Sum per-word counts across several top-word lists.

    Ties are broken alphabetically so the outcome does not depend on the
    order the lists are merged in.

    Args:
        word_lists: (word, count) sequences to merge
        top_n: Number of words to keep (None keeps all)

    Returns:
        (word, count) pairs, count-descending
    """
    totals: Counter[str] = Counter()
    for words in word_lists:
        for word, count in words:
            totals[word] += count

    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    if top_n is None:
        return ranked
    return ranked[: max(top_n, 0)]


class CorpusState:
    """
    Mutable corpus-wide state, owned by a single aggregator.

    Not thread-safe; every mutation happens on the aggregator's consume
    loop.
    """

    def __init__(self) -> None:
        self.expected_count: int | None = None
        self.received: dict[int, SectionResult] = {}
        self.total_words: int = 0
        self._complete = False

        # (sequence, sentence) per section; the sequence keeps ranking insertion-stable
        self._sentences: dict[int, list[tuple[int, str]]] = {}
        self._sequence = 0

    @property
    def phase(self) -> AggregatorPhase:
        """Current lifecycle phase."""
        if self._complete:
            return AggregatorPhase.COMPLETE
        if self.expected_count is None:
            return AggregatorPhase.AWAITING_EXPECTED_COUNT
        return AggregatorPhase.COLLECTING

    @property
    def is_complete(self) -> bool:
        """True once the expected count is known and enough sections arrived."""
        return self._complete

    @property
    def received_count(self) -> int:
        """Number of distinct sections received."""
        return len(self.received)

    def _check_completion(self) -> bool:
        if (
            not self._complete
            and self.expected_count is not None
            and len(self.received) >= self.expected_count
        ):
            self._complete = True
            logger.info(
                "corpus_complete",
                expected=self.expected_count,
                received=len(self.received),
                total_words=self.total_words,
            )
        return self._complete

    def set_expected_count(self, count: int) -> bool:
        """
        Record the announced number of sections.

        The first announcement wins; later ones with a different value are
        logged and ignored.

        Returns:
            Whether the corpus is complete
        """
        if self._complete:
            logger.warning("count_after_completion_ignored", count=count)
            return True

        if self.expected_count is None:
            self.expected_count = count
            logger.info(
                "expected_count_set",
                expected=count,
                already_received=len(self.received),
            )
        elif self.expected_count != count:
            logger.warning(
                "conflicting_count_ignored",
                expected=self.expected_count,
                announced=count,
            )

        return self._check_completion()

    def record(self, result: SectionResult) -> bool:
        """
        Record one section result.

        A duplicate section id replaces the earlier result (last write
        wins); the earlier result's words and sentences are retracted.

        Returns:
            Whether the corpus is complete
        """
        if self._complete:
            logger.warning("result_after_completion_ignored", section_id=result.section_id)
            return True

        previous = self.received.get(result.section_id)
        if previous is not None:
            self.total_words -= previous.word_count
            logger.warning("duplicate_section_replaced", section_id=result.section_id)

        self.received[result.section_id] = result
        self.total_words += result.word_count
        self._sentences[result.section_id] = self._number(result.ranked_sentences)

        logger.info(
            "result_recorded",
            section_id=result.section_id,
            received=len(self.received),
            expected=self.expected_count,
        )
        return self._check_completion()

    def _number(self, sentences: Iterable[str]) -> list[tuple[int, str]]:
        numbered = []
        for sentence in sentences:
            if sentence:
                numbered.append((self._sequence, sentence))
                self._sequence += 1
        return numbered

    def global_top_words(self, top_n: int) -> list[tuple[str, int]]:
        """Merge every section's top words and keep the top_n most frequent."""
        return merge_top_words(
            (self.received[section_id].top_words for section_id in sorted(self.received)),
            top_n,
        )

    def sentiment_summary(self) -> SentimentSummary:
        """Average the section scores and count sections per label."""
        labels = Counter(result.sentiment_label for result in self.received.values())
        scores = [result.sentiment_score for result in self.received.values()]
        return SentimentSummary(
            average=sum(scores) / len(scores) if scores else 0.0,
            positive=labels[SentimentLabel.POSITIVE],
            negative=labels[SentimentLabel.NEGATIVE],
            neutral=labels[SentimentLabel.NEUTRAL],
        )

    def sentence_ranking(self) -> list[str]:
        """All sentences across sections, longest first, ties in arrival order."""
        numbered = [entry for entries in self._sentences.values() for entry in entries]
        numbered.sort(key=lambda entry: (-len(entry[1]), entry[0]))
        return [sentence for _sequence, sentence in numbered]

    def redacted_texts(self) -> list[str]:
        """Each section's redacted text, in section id order."""
        return [self.received[section_id].redacted_text for section_id in sorted(self.received)]

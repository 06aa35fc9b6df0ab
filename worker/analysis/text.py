"""Pure text analyses run once per section."""

import re
from collections import Counter

from pipeline.models import Sentiment, SentimentLabel
from pipeline.sectionizer import split_sentences
from worker.analysis.lexicon import DEFAULT_LEXICON, SentimentLexicon

NON_ALPHA = re.compile(r"[^A-Za-z]+")

# Capitalized word: one uppercase letter followed by lowercase letters.
# Sentence-initial common words match too.
NAME_PATTERN = re.compile(r"\b[A-Z][a-z]+\b")

DEFAULT_REDACTION_TOKEN = "FFFFF"


def _is_alpha(char: str) -> bool:
    return "a" <= char <= "z" or "A" <= char <= "Z"


def count_words(text: str) -> int:
    """
    Count whitespace-separated words.

    At most one non-alphabetic character is stripped from the end and
    then from the start of each token; a token counts if anything is
    left. "--" is not a word, "(hello)" and "a." are.
    """
    count = 0
    for token in text.split():
        if token and not _is_alpha(token[-1]):
            token = token[:-1]
        if token and not _is_alpha(token[0]):
            token = token[1:]
        if token:
            count += 1
    return count


def normalize_words(text: str) -> list[str]:
    """Split on whitespace, drop non-alphabetic characters and lower-case."""
    words = (NON_ALPHA.sub("", token).lower() for token in text.split())
    return [word for word in words if word]


def top_words(text: str, k: int) -> list[tuple[str, int]]:
    """
    Find the k most frequent normalized words.

    Args:
        text: Section text
        k: Number of words to return

    Returns:
        (word, count) pairs, count-descending; ties in alphabetical order
    """
    if k <= 0:
        return []
    counts = Counter(normalize_words(text))
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:k]


def analyze_sentiment(text: str, lexicon: SentimentLexicon = DEFAULT_LEXICON) -> Sentiment:
    """
    Score text against a positive and a negative word list.

    The score is (positive - negative) / total normalized words. Text with
    no words is neutral with a score of 0.
    """
    words = normalize_words(text)
    if not words:
        return Sentiment(label=SentimentLabel.NEUTRAL, score=0.0)

    positive = sum(1 for word in words if word in lexicon.positive)
    # A word listed as both positive and negative counts as positive
    negative = sum(
        1 for word in words if word in lexicon.negative and word not in lexicon.positive
    )
    score = (positive - negative) / len(words)

    if score > lexicon.threshold:
        label = SentimentLabel.POSITIVE
    elif score < -lexicon.threshold:
        label = SentimentLabel.NEGATIVE
    else:
        label = SentimentLabel.NEUTRAL

    return Sentiment(label=label, score=score)


def redact_names(text: str, token: str = DEFAULT_REDACTION_TOKEN) -> str:
    """Replace every capitalized word with a placeholder token."""
    return NAME_PATTERN.sub(lambda _match: token, text)


def rank_sentences(text: str) -> list[str]:
    """Split text into sentences ordered by length, longest first."""
    return sorted(split_sentences(text), key=len, reverse=True)

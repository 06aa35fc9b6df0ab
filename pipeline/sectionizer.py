"""Sentence splitting and section grouping.

Every sentence must end in terminal punctuation: a trailing fragment
without one is dropped rather than emitted.
"""

from pipeline.exceptions import ConfigError
from pipeline.models import Section

SENTENCE_TERMINATORS = frozenset(".!?")
TRIM_CHARS = " \t\r\n"


def join_lines(text: str) -> str:
    """
    Concatenate all non-empty lines into one logical text.

    A single space is inserted between lines unless the text accumulated
    so far already ends in whitespace.
    """
    joined: list[str] = []
    for line in text.split("\n"):
        if not line:
            continue
        if joined and not joined[-1][-1].isspace():
            joined.append(" ")
        joined.append(line)
    return "".join(joined)


def split_sentences(text: str) -> list[str]:
    """
    Split text into trimmed, terminator-bounded sentences.

    Args:
        text: Text to scan

    Returns:
        Sentences in original order, each ending in '.', '!' or '?'
    """
    sentences: list[str] = []
    current: list[str] = []

    for char in text:
        current.append(char)
        if char in SENTENCE_TERMINATORS:
            sentence = "".join(current).strip(TRIM_CHARS)
            if sentence:
                sentences.append(sentence)
            current = []

    return sentences


def split(text: str, sentences_per_section: int) -> list[Section]:
    """
    Split raw text into sections of a fixed sentence count.

    Args:
        text: Raw document text, possibly spanning many lines
        sentences_per_section: Number of sentences per section

    Returns:
        Sections with ordinal ids starting at 0; the last one may be short

    Raises:
        ConfigError: If sentences_per_section is not positive
    """
    if sentences_per_section <= 0:
        raise ConfigError(
            f"sentences_per_section must be positive, got {sentences_per_section}",
            field="sentences_per_section",
        )

    sections: list[Section] = []
    buffer: list[str] = []

    for sentence in split_sentences(join_lines(text)):
        buffer.append(sentence + " ")
        if len(buffer) >= sentences_per_section:
            sections.append(Section(id=len(sections), text="".join(buffer)))
            buffer = []

    if buffer:
        sections.append(Section(id=len(sections), text="".join(buffer)))

    return sections

"""Wire encoding shared by the producer, workers and aggregator.

Two formats are supported:

- ``delimited``: the pipe-delimited text protocol. Free text is not
  escaped, so a processed text or sentence containing ``|`` or ``~``
  will not decode back to the same value.
- ``tagged``: one JSON object per message, validated with pydantic.

Decoders accept both formats; a body starting with ``{`` is treated as
a tagged record.
"""

import math
from enum import Enum

from pydantic import ValidationError

from pipeline.exceptions import MalformedMessage
from pipeline.models import Section, SectionResult, SentimentLabel
from pipeline.schemas import ResultRecord, TaskRecord, TotalRecord, wire_record_adapter

SECTION_PREFIX = "SECTION_"
TOTAL_PREFIX = "TOTAL_SECTIONS:"

FIELD_SEPARATOR = "|"
PAIR_SEPARATOR = ";"
VALUE_SEPARATOR = ":"
SENTENCE_SEPARATOR = "~"

WORDS_FIELD = "words:"
TOP_FIELD = "top:"
SENTIMENT_FIELD = "sentiment:"
NAMES_REPLACED_FIELD = "names_replaced:"
PROCESSED_TEXT_FIELD = "processed_text:"
SORTED_FIELD = "sorted:"


class WireFormat(str, Enum):
    """Supported message encodings."""

    DELIMITED = "delimited"
    TAGGED = "tagged"


def _is_tagged(message: str) -> bool:
    return message.lstrip().startswith("{")


def _parse_int(value: str, what: str, message: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise MalformedMessage(f"Invalid {what}: {value!r}", raw=message) from None


def _parse_float(value: str, what: str, message: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise MalformedMessage(f"Invalid {what}: {value!r}", raw=message) from None


def format_score(score: float) -> str:
    """Format a sentiment score so that it parses back to the same float."""
    if float(score).is_integer():
        return str(int(score))
    return repr(score)


def format_section_id(section_id: int) -> str:
    """Format a section id as it appears on the wire."""
    return f"{SECTION_PREFIX}{section_id}"


def parse_section_id(token: str, message: str) -> int:
    """Parse a ``SECTION_<id>`` token."""
    if not token.startswith(SECTION_PREFIX):
        raise MalformedMessage(f"Missing {SECTION_PREFIX} prefix", raw=message)
    section_id = _parse_int(token[len(SECTION_PREFIX) :], "section id", message)
    if section_id < 0:
        raise MalformedMessage(f"Negative section id: {section_id}", raw=message)
    return section_id


# =========================================================
# Delimited format
# =========================================================


def encode_task(section: Section) -> str:
    """Encode a section processing task as ``SECTION_<id>|<text>``."""
    return f"{format_section_id(section.id)}{FIELD_SEPARATOR}{section.text}"


def decode_task(message: str) -> Section:
    """
    Decode a delimited task message.

    Only the first ``|`` separates the id from the text, so the section
    text itself may contain the separator.
    """
    section_token, separator, text = message.partition(FIELD_SEPARATOR)
    if not separator:
        raise MalformedMessage("Task message has no text field", raw=message)
    return Section(id=parse_section_id(section_token, message), text=text)


def encode_total(total_sections: int) -> str:
    """Encode the section count announcement."""
    return f"{TOTAL_PREFIX}{total_sections}"


def is_total(message: str) -> bool:
    """Check whether a delimited message is a section count announcement."""
    return message.startswith(TOTAL_PREFIX)


def decode_total(message: str) -> int:
    """Decode a ``TOTAL_SECTIONS:<n>`` announcement."""
    if not is_total(message):
        raise MalformedMessage(f"Missing {TOTAL_PREFIX} prefix", raw=message)
    total = _parse_int(message[len(TOTAL_PREFIX) :].strip(), "section count", message)
    if total < 0:
        raise MalformedMessage(f"Negative section count: {total}", raw=message)
    return total


def encode_top_words(top_words: tuple[tuple[str, int], ...]) -> str:
    """Encode ``word:count`` pairs joined by ``;``."""
    return PAIR_SEPARATOR.join(f"{word}{VALUE_SEPARATOR}{count}" for word, count in top_words)


def decode_top_words(value: str, message: str) -> tuple[tuple[str, int], ...]:
    """Decode ``word:count`` pairs; pairs without a colon are skipped."""
    pairs: list[tuple[str, int]] = []
    for pair in value.split(PAIR_SEPARATOR):
        word, separator, count = pair.partition(VALUE_SEPARATOR)
        if not separator:
            continue
        pairs.append((word, _parse_int(count, f"count for {word!r}", message)))
    return tuple(pairs)


def encode_result(result: SectionResult) -> str:
    """Encode a section result in the delimited format."""
    fields = [
        format_section_id(result.section_id),
        f"{WORDS_FIELD}{result.word_count}",
        f"{TOP_FIELD}{encode_top_words(result.top_words)}",
        f"{SENTIMENT_FIELD}{result.sentiment_label.value}"
        f"{VALUE_SEPARATOR}{format_score(result.sentiment_score)}",
        f"{NAMES_REPLACED_FIELD}{result.names_replaced}",
        f"{PROCESSED_TEXT_FIELD}{result.redacted_text}",
        f"{SORTED_FIELD}{SENTENCE_SEPARATOR.join(result.ranked_sentences)}",
    ]
    return FIELD_SEPARATOR.join(fields)


def decode_result(message: str) -> SectionResult:
    """
    Decode a delimited result message.

    Fields are recognized by prefix and may appear in any order; unknown
    prefixes are ignored.

    Raises:
        MalformedMessage: If the section id, word count or sentiment is
            missing or cannot be parsed
    """
    section_id: int | None = None
    word_count: int | None = None
    sentiment: tuple[SentimentLabel, float] | None = None
    top_words: tuple[tuple[str, int], ...] = ()
    redacted_text = ""
    ranked_sentences: tuple[str, ...] = ()

    for token in message.split(FIELD_SEPARATOR):
        if token.startswith(SECTION_PREFIX):
            if section_id is None:
                section_id = parse_section_id(token, message)
        elif token.startswith(WORDS_FIELD):
            word_count = _parse_int(token[len(WORDS_FIELD) :], "word count", message)
        elif token.startswith(TOP_FIELD):
            top_words = decode_top_words(token[len(TOP_FIELD) :], message)
        elif token.startswith(SENTIMENT_FIELD):
            sentiment = _decode_sentiment(token[len(SENTIMENT_FIELD) :], message)
        elif token.startswith(PROCESSED_TEXT_FIELD):
            redacted_text = token[len(PROCESSED_TEXT_FIELD) :]
        elif token.startswith(SORTED_FIELD):
            ranked_sentences = tuple(
                s for s in token[len(SORTED_FIELD) :].split(SENTENCE_SEPARATOR) if s
            )
        # names_replaced is derived from processed_text; other prefixes are ignored

    if section_id is None:
        raise MalformedMessage("Result message has no section id", raw=message)
    if word_count is None:
        raise MalformedMessage("Result message has no word count", raw=message)
    if sentiment is None:
        raise MalformedMessage("Result message has no sentiment", raw=message)

    return SectionResult(
        section_id=section_id,
        word_count=word_count,
        top_words=top_words,
        sentiment_label=sentiment[0],
        sentiment_score=sentiment[1],
        redacted_text=redacted_text,
        ranked_sentences=ranked_sentences,
    )


def _decode_sentiment(value: str, message: str) -> tuple[SentimentLabel, float]:
    label, separator, score = value.partition(VALUE_SEPARATOR)
    if not separator:
        raise MalformedMessage(f"Invalid sentiment: {value!r}", raw=message)
    try:
        sentiment_label = SentimentLabel(label)
    except ValueError:
        raise MalformedMessage(f"Unknown sentiment label: {label!r}", raw=message) from None
    sentiment_score = _parse_float(score, "sentiment score", message)
    if not math.isfinite(sentiment_score) or not -1.0 <= sentiment_score <= 1.0:
        raise MalformedMessage(f"Sentiment score out of range: {score!r}", raw=message)
    return sentiment_label, sentiment_score


# =========================================================
# Tagged format
# =========================================================


def _decode_record(message: str) -> TaskRecord | TotalRecord | ResultRecord:
    try:
        return wire_record_adapter.validate_json(message)
    except ValidationError as e:
        raise MalformedMessage(
            f"Invalid tagged record: {e.error_count()} error(s)", raw=message
        ) from e


def result_to_record(result: SectionResult) -> ResultRecord:
    """Convert a section result to its tagged record."""
    return ResultRecord(
        section_id=result.section_id,
        word_count=result.word_count,
        top_words=list(result.top_words),
        sentiment_label=result.sentiment_label,
        sentiment_score=result.sentiment_score,
        names_replaced=result.names_replaced,
        processed_text=result.redacted_text,
        sorted_sentences=list(result.ranked_sentences),
    )


def record_to_result(record: ResultRecord) -> SectionResult:
    """Convert a tagged record back to a section result."""
    return SectionResult(
        section_id=record.section_id,
        word_count=record.word_count,
        top_words=tuple((word, count) for word, count in record.top_words),
        sentiment_label=record.sentiment_label,
        sentiment_score=record.sentiment_score,
        redacted_text=record.processed_text,
        ranked_sentences=tuple(record.sorted_sentences),
    )


# =========================================================
# Codec facade
# =========================================================


class MessageCodec:
    """Encodes messages in one wire format and decodes either format."""

    def __init__(self, wire_format: WireFormat | str = WireFormat.DELIMITED):
        self.wire_format = WireFormat(wire_format)

    def encode_task(self, section: Section) -> bytes:
        """Encode a section processing task."""
        if self.wire_format == WireFormat.TAGGED:
            message = TaskRecord(section_id=section.id, text=section.text).model_dump_json()
        else:
            message = encode_task(section)
        return to_bytes(message)

    def decode_task(self, body: bytes) -> Section:
        """Decode a section processing task."""
        message = from_bytes(body)
        if not _is_tagged(message):
            return decode_task(message)
        record = _decode_record(message)
        if not isinstance(record, TaskRecord):
            raise MalformedMessage(f"Expected a task record, got {record.kind!r}", raw=message)
        return Section(id=record.section_id, text=record.text)

    def encode_total(self, total_sections: int) -> bytes:
        """Encode the section count announcement."""
        if self.wire_format == WireFormat.TAGGED:
            message = TotalRecord(total_sections=total_sections).model_dump_json()
        else:
            message = encode_total(total_sections)
        return to_bytes(message)

    def encode_result(self, result: SectionResult) -> bytes:
        """Encode a section result."""
        if self.wire_format == WireFormat.TAGGED:
            message = result_to_record(result).model_dump_json()
        else:
            message = encode_result(result)
        return to_bytes(message)

    def decode_result_message(self, body: bytes) -> SectionResult | int:
        """
        Decode a message from the result queue.

        Returns:
            The announced section count, or a section result
        """
        message = from_bytes(body)
        if not _is_tagged(message):
            if is_total(message):
                return decode_total(message)
            return decode_result(message)

        record = _decode_record(message)
        if isinstance(record, TotalRecord):
            return record.total_sections
        if isinstance(record, ResultRecord):
            return record_to_result(record)
        raise MalformedMessage(f"Unexpected {record.kind!r} record on result queue", raw=message)


def to_bytes(message: str) -> bytes:
    """Encode a wire message for the queue service."""
    return message.encode("utf-8")


def from_bytes(body: bytes) -> str:
    """Decode a queue delivery into a wire message."""
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedMessage(f"Message is not valid UTF-8: {e.reason}") from e

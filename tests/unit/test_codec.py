"""Tests for the wire codec."""

import json

import pytest

from pipeline.codec import (
    MessageCodec,
    WireFormat,
    decode_result,
    decode_task,
    decode_total,
    encode_result,
    encode_task,
    encode_total,
    format_score,
    from_bytes,
)
from pipeline.exceptions import MalformedMessage
from pipeline.models import Section, SectionResult, SentimentLabel


@pytest.fixture
def result() -> SectionResult:
    return SectionResult(
        section_id=3,
        word_count=7,
        top_words=(("great", 1), ("job", 1), ("today", 1)),
        sentiment_label=SentimentLabel.POSITIVE,
        sentiment_score=1 / 7,
        redacted_text="FFFFF job today. FFFFF team failed badly. ",
        ranked_sentences=("The team failed badly.", "Great job today."),
    )


class TestTaskMessages:
    """Tests for task encoding."""

    def test_encode(self) -> None:
        """Tasks are SECTION_<id>|<text>."""
        assert encode_task(Section(id=4, text="Hello there. ")) == "SECTION_4|Hello there. "

    def test_decode(self) -> None:
        """Decoding restores id and text."""
        assert decode_task("SECTION_12|Some text. ") == Section(id=12, text="Some text. ")

    def test_text_may_contain_pipe(self) -> None:
        """Only the first pipe separates id and text."""
        assert decode_task("SECTION_0|a|b.").text == "a|b."

    @pytest.mark.parametrize(
        "message",
        ["SECTION_x|text", "CHAPTER_1|text", "SECTION_1", "SECTION_-2|text", ""],
    )
    def test_malformed(self, message: str) -> None:
        """Bad ids or missing text raise MalformedMessage."""
        with pytest.raises(MalformedMessage):
            decode_task(message)


class TestTotalMessages:
    """Tests for the section count announcement."""

    def test_encode(self) -> None:
        assert encode_total(12) == "TOTAL_SECTIONS:12"

    def test_decode(self) -> None:
        assert decode_total("TOTAL_SECTIONS:0") == 0
        assert decode_total("TOTAL_SECTIONS:25") == 25

    @pytest.mark.parametrize(
        "message", ["TOTAL_SECTIONS:", "TOTAL_SECTIONS:abc", "TOTAL_SECTIONS:-1"]
    )
    def test_malformed(self, message: str) -> None:
        with pytest.raises(MalformedMessage):
            decode_total(message)


class TestFormatScore:
    """Tests for sentiment score formatting."""

    def test_zero_has_no_fraction(self) -> None:
        """A zero score is written as 0."""
        assert format_score(0.0) == "0"

    def test_fraction_round_trips(self) -> None:
        """Fractional scores parse back to the same float."""
        assert float(format_score(1 / 7)) == 1 / 7


class TestResultMessages:
    """Tests for result encoding and decoding."""

    def test_encode_layout(self, result: SectionResult) -> None:
        """Fields appear in the documented order."""
        message = encode_result(result)
        fields = message.split("|")
        assert fields[0] == "SECTION_3"
        assert fields[1] == "words:7"
        assert fields[2] == "top:great:1;job:1;today:1"
        assert fields[3].startswith("sentiment:positive:0.14")
        assert fields[4] == f"names_replaced:{len(result.redacted_text)}"
        assert fields[5] == f"processed_text:{result.redacted_text}"
        assert fields[6] == "sorted:The team failed badly.~Great job today."

    def test_neutral_zero_encoding(self) -> None:
        """Empty sections encode sentiment as neutral:0."""
        empty = SectionResult(section_id=0, word_count=0)
        assert "|sentiment:neutral:0|" in encode_result(empty)

    def test_round_trip(self, result: SectionResult) -> None:
        """Decoding an encoded result restores every field."""
        assert decode_result(encode_result(result)) == result

    def test_fields_in_any_order(self) -> None:
        """Fields are recognized by prefix, not position."""
        message = (
            "sorted:Long sentence here.~Short.|sentiment:negative:-0.5|SECTION_2"
            "|processed_text:FFFFF hi.|top:bad:2|words:4"
        )
        decoded = decode_result(message)
        assert decoded.section_id == 2
        assert decoded.word_count == 4
        assert decoded.top_words == (("bad", 2),)
        assert decoded.sentiment_label == SentimentLabel.NEGATIVE
        assert decoded.sentiment_score == -0.5
        assert decoded.redacted_text == "FFFFF hi."
        assert decoded.ranked_sentences == ("Long sentence here.", "Short.")

    def test_unknown_fields_ignored(self) -> None:
        """Unrecognized prefixes are skipped."""
        message = "SECTION_1|words:3|future:thing|sentiment:neutral:0|lang:en"
        decoded = decode_result(message)
        assert decoded.section_id == 1
        assert decoded.word_count == 3

    def test_optional_fields_default(self) -> None:
        """Missing top, text and sorted fields decode as empty."""
        decoded = decode_result("SECTION_1|words:0|sentiment:neutral:0")
        assert decoded.top_words == ()
        assert decoded.redacted_text == ""
        assert decoded.ranked_sentences == ()

    def test_trailing_sentence_separator(self) -> None:
        """Empty pieces of the sorted field are skipped."""
        decoded = decode_result("SECTION_1|words:2|sentiment:neutral:0|sorted:One two.~")
        assert decoded.ranked_sentences == ("One two.",)

    def test_delimiter_in_text_is_lossy(self) -> None:
        """A pipe inside processed text truncates it in the delimited format."""
        lossy = SectionResult(section_id=0, word_count=1, redacted_text="a|b")
        assert decode_result(encode_result(lossy)).redacted_text == "a"

    @pytest.mark.parametrize(
        "message",
        [
            "words:3|sentiment:neutral:0",
            "SECTION_z|words:3|sentiment:neutral:0",
            "SECTION_1|words:three|sentiment:neutral:0",
            "SECTION_1|sentiment:neutral:0",
            "SECTION_1|words:3",
            "SECTION_1|words:3|sentiment:neutral",
            "SECTION_1|words:3|sentiment:ecstatic:0.9",
            "SECTION_1|words:3|sentiment:neutral:high",
            "SECTION_1|words:3|sentiment:positive:nan",
            "SECTION_1|words:3|sentiment:positive:inf",
            "SECTION_1|words:3|sentiment:positive:7.5",
            "SECTION_1|words:3|sentiment:negative:-1.01",
            "SECTION_1|words:3|sentiment:neutral:0|top:word:many",
        ],
    )
    def test_malformed(self, message: str) -> None:
        """Missing or unparseable required fields raise MalformedMessage."""
        with pytest.raises(MalformedMessage):
            decode_result(message)


class TestMessageCodec:
    """Tests for the codec facade."""

    def test_delimited_task_bytes(self) -> None:
        """Delimited tasks are UTF-8 text."""
        codec = MessageCodec(WireFormat.DELIMITED)
        assert codec.encode_task(Section(id=1, text="Hi. ")) == b"SECTION_1|Hi. "

    def test_tagged_task_is_json(self) -> None:
        """Tagged tasks are JSON records with a kind."""
        body = MessageCodec("tagged").encode_task(Section(id=1, text="Hi. "))
        assert json.loads(body) == {"kind": "task", "section_id": 1, "text": "Hi. "}

    @pytest.mark.parametrize("wire_format", ["delimited", "tagged"])
    def test_task_round_trip(self, wire_format: str) -> None:
        codec = MessageCodec(wire_format)
        section = Section(id=9, text="Alpha beta. Gamma? ")
        assert codec.decode_task(codec.encode_task(section)) == section

    @pytest.mark.parametrize("wire_format", ["delimited", "tagged"])
    def test_result_queue_dispatch(self, wire_format: str, result: SectionResult) -> None:
        """The result queue carries both counts and results."""
        codec = MessageCodec(wire_format)
        assert codec.decode_result_message(codec.encode_total(5)) == 5
        assert codec.decode_result_message(codec.encode_result(result)) == result

    def test_tagged_survives_delimiters(self) -> None:
        """The tagged format round-trips text containing every delimiter."""
        codec = MessageCodec(WireFormat.TAGGED)
        tricky = SectionResult(
            section_id=0,
            word_count=2,
            redacted_text="a|b:c;d~e",
            ranked_sentences=("x|y~z.", "w:v;."),
        )
        assert codec.decode_result_message(codec.encode_result(tricky)) == tricky

    def test_decodes_either_format(self, result: SectionResult) -> None:
        """A delimited codec still accepts tagged bodies and vice versa."""
        delimited = MessageCodec(WireFormat.DELIMITED)
        tagged = MessageCodec(WireFormat.TAGGED)
        assert delimited.decode_result_message(tagged.encode_result(result)) == result
        assert tagged.decode_result_message(delimited.encode_result(result)) == result

    def test_tagged_invalid_record(self) -> None:
        """Invalid JSON records raise MalformedMessage."""
        codec = MessageCodec(WireFormat.TAGGED)
        with pytest.raises(MalformedMessage):
            codec.decode_result_message(b'{"kind": "result", "section_id": 1}')
        with pytest.raises(MalformedMessage):
            codec.decode_result_message(b"{not json")

    def test_task_record_on_result_queue(self) -> None:
        """A task record is not a valid result-queue message."""
        codec = MessageCodec(WireFormat.TAGGED)
        with pytest.raises(MalformedMessage):
            codec.decode_result_message(codec.encode_task(Section(id=0, text="x.")))

    def test_invalid_utf8(self) -> None:
        """Bodies that are not UTF-8 are malformed."""
        with pytest.raises(MalformedMessage):
            from_bytes(b"\xff\xfe")

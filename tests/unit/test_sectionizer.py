"""Tests for sentence splitting and section grouping."""

import pytest

from pipeline.exceptions import ConfigError
from pipeline.models import Section
from pipeline.sectionizer import join_lines, split, split_sentences


class TestJoinLines:
    """Tests for joining lines into one logical text."""

    def test_inserts_space_between_lines(self) -> None:
        """Lines are joined with a single space."""
        assert join_lines("One.\nTwo.") == "One. Two."

    def test_skips_empty_lines(self) -> None:
        """Blank lines contribute nothing."""
        assert join_lines("One.\n\n\nTwo.") == "One. Two."

    def test_no_extra_space_after_trailing_whitespace(self) -> None:
        """A line already ending in whitespace gets no extra space."""
        assert join_lines("One. \nTwo.") == "One. Two."

    def test_empty_text(self) -> None:
        """Empty input joins to an empty string."""
        assert join_lines("") == ""


class TestSplitSentences:
    """Tests for terminator-based sentence splitting."""

    def test_all_terminators(self) -> None:
        """Period, exclamation and question marks end sentences."""
        assert split_sentences("Hi. Wow! Really?") == ["Hi.", "Wow!", "Really?"]

    def test_trims_whitespace(self) -> None:
        """Leading and trailing whitespace is removed."""
        assert split_sentences("  \tHello there.\r\n  Bye.") == ["Hello there.", "Bye."]

    def test_drops_unterminated_fragment(self) -> None:
        """Text after the last terminator is dropped."""
        assert split_sentences("Done. Not finished") == ["Done."]

    def test_consecutive_terminators(self) -> None:
        """Each terminator ends its own sentence."""
        assert split_sentences("What?! Yes.") == ["What?", "!", "Yes."]

    def test_only_whitespace_before_terminator(self) -> None:
        """A terminator counts as a non-empty sentence by itself."""
        assert split_sentences("   .") == ["."]

    def test_empty_text(self) -> None:
        """Empty text has no sentences."""
        assert split_sentences("") == []


class TestSplit:
    """Tests for grouping sentences into sections."""

    def test_example_document(self) -> None:
        """Two sentences with two per section make one section."""
        sections = split("Great job today. The team failed badly.", 2)
        assert sections == [Section(id=0, text="Great job today. The team failed badly. ")]

    def test_groups_by_count(self) -> None:
        """Sections hold the configured number of sentences."""
        sections = split("A one. B two. C three. D four.", 2)
        assert [s.text for s in sections] == ["A one. B two. ", "C three. D four. "]
        assert [s.id for s in sections] == [0, 1]

    def test_short_final_section(self) -> None:
        """Leftover sentences form a final short section."""
        sections = split("One. Two. Three.", 2)
        assert len(sections) == 2
        assert sections[1] == Section(id=1, text="Three. ")

    def test_multiline_input(self) -> None:
        """Sentences may span lines."""
        sections = split("This sentence\nspans two lines.\n\nNext one.", 1)
        assert [s.text for s in sections] == ["This sentence spans two lines. ", "Next one. "]

    def test_empty_input(self) -> None:
        """Empty input yields no sections."""
        assert split("", 3) == []
        assert split("\n\n", 3) == []

    def test_fragment_only_input(self) -> None:
        """Input without any terminator yields no sections."""
        assert split("no punctuation here", 1) == []

    def test_trailing_fragment_dropped(self) -> None:
        """An unterminated tail never reaches a section."""
        sections = split("Kept. Also kept! dropped tail", 5)
        assert sections == [Section(id=0, text="Kept. Also kept! ")]

    def test_preserves_every_sentence_in_order(self) -> None:
        """Concatenated sections reproduce every sentence exactly once."""
        text = "First one. Second?\nThird!  Fourth here. Fifth. Sixth. tail"
        sections = split(text, 4)
        rebuilt = split_sentences("".join(s.text for s in sections))
        assert rebuilt == split_sentences(join_lines(text))
        assert len(rebuilt) == 6

    @pytest.mark.parametrize("count", [0, -1])
    def test_non_positive_count_rejected(self, count: int) -> None:
        """sentences_per_section must be positive."""
        with pytest.raises(ConfigError):
            split("One.", count)

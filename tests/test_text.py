"""Tests for the title word inversion."""

import pytest

from library_mcp.text import invert_words


class TestInvertWords:
    def test_reverses_each_word(self):
        assert invert_words("The Great Gatsby") == "ehT taerG ybstaG"

    def test_empty_string(self):
        assert invert_words("") == ""

    @pytest.mark.parametrize("text", [" ", "   \t\n", "!?,.", "-- * --", "é ü ß"])
    def test_text_without_words_is_unchanged(self, text):
        assert invert_words(text) == text

    def test_single_run_is_fully_reversed(self):
        assert invert_words("Mockingbird") == "dribgnikcoM"

    def test_separators_keep_their_positions(self):
        assert invert_words("Catch-22, vol. 1") == "hctaC-22, lov. 1"
        assert invert_words("  leading and trailing  ") == "  gnidael dna gniliart  "

    def test_digits_are_part_of_words(self):
        assert invert_words("Fahrenheit 451") == "tiehnerhaF 154"
        assert invert_words("abc123") == "321cba"

    def test_non_ascii_letters_split_words(self):
        # "é" is a separator, so "Les Misérables" has runs "Les", "Mis", "rables"
        assert invert_words("Les Misérables") == "seL siMéselbar"

    @pytest.mark.parametrize(
        "text",
        [
            "The Great Gatsby",
            "Catch-22, vol. 1",
            "a",
            "racecar level",
            "x/y\\z  (1984)",
            "Cien años de soledad",
            "",
        ],
    )
    def test_inversion_is_self_inverse(self, text):
        assert invert_words(invert_words(text)) == text

    def test_length_is_preserved(self):
        text = "It's a Wonderful Life!"
        assert len(invert_words(text)) == len(text)

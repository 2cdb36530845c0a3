"""Tests for text utility functions."""

from __future__ import annotations

import pytest

from hermes.utils.text import char_count, extract_title, is_blank, word_count


class TestExtractTitle:
    """Test extract_title function."""

    def test_heading_markers_stripped(self) -> None:
        assert extract_title("# Hello World\n\nBody") == "Hello World"

    def test_multiple_heading_markers(self) -> None:
        assert extract_title("###   Deep heading  \ntext") == "Deep heading"

    def test_skips_leading_blank_lines(self) -> None:
        assert extract_title("\n\n   \nFirst real line\nsecond") == "First real line"

    def test_skips_marker_only_lines(self) -> None:
        """A line of bare '#' characters yields nothing; move on."""
        assert extract_title("###\n  #  \nActual title") == "Actual title"

    def test_all_blank_gives_empty(self) -> None:
        assert extract_title("\n\n   \n") == ""

    def test_empty_string(self) -> None:
        assert extract_title("") == ""

    def test_truncates_to_120_characters(self) -> None:
        title = extract_title("x" * 200 + "\nbody")
        assert title == "x" * 120

    def test_truncates_by_character_not_byte(self) -> None:
        title = extract_title("é" * 150)
        assert len(title) == 120
        assert title == "é" * 120

    def test_custom_max_chars(self) -> None:
        assert extract_title("abcdef", max_chars=3) == "abc"

    def test_inner_hash_kept(self) -> None:
        assert extract_title("Issue #42 notes") == "Issue #42 notes"

    def test_windows_line_endings(self) -> None:
        assert extract_title("\r\n# Title\r\nbody") == "Title"

    def test_only_newline_splits_lines(self) -> None:
        assert extract_title("Intro\x0cpart two\nbody") == "Intro\x0cpart two"
        assert extract_title("One two") == "One two"


class TestCounts:
    """Test word_count and char_count."""

    def test_word_count_collapses_whitespace(self) -> None:
        assert word_count("one two  three") == 3

    def test_word_count_newlines_and_tabs(self) -> None:
        assert word_count("one\ttwo\n\nthree \n") == 3

    def test_word_count_empty(self) -> None:
        assert word_count("") == 0
        assert word_count("   \n ") == 0

    def test_char_count_includes_spaces(self) -> None:
        text = "one two  three"
        assert char_count(text) == len(text) == 14

    def test_char_count_counts_characters(self) -> None:
        assert char_count("héllo wörld") == 11


class TestIsBlank:
    """Test is_blank function."""

    @pytest.mark.parametrize("value", ["", "   ", "\n\t\n", None])
    def test_blank_values(self, value) -> None:
        assert is_blank(value)

    def test_non_blank(self) -> None:
        assert not is_blank("  x  ")

"""Tests for text composition and file naming."""

from __future__ import annotations

import pytest

from avb.composer import ComposedPart, compose, entry_name, first_line, normalize_file_name

PARTS = [ComposedPart("Hook", "H1"), ComposedPart("Body", "B1")]


class TestCompose:
    """compose()."""

    def test_without_headings(self) -> None:
        assert compose(PARTS, False, "\n\n") == "H1\n\nB1\n"

    def test_with_headings_and_custom_separator(self) -> None:
        assert compose(PARTS, True, " -- ") == "Hook\nH1 -- Body\nB1\n"

    def test_empty_parts_is_single_newline(self) -> None:
        assert compose([], False, "\n\n") == "\n"
        assert compose([], True, " | ") == "\n"

    def test_trims_padding(self) -> None:
        parts = [ComposedPart("A", "\n\n  first"), ComposedPart("B", "last  \n\n")]
        assert compose(parts, False, "\n") == "first\nlast\n"

    def test_empty_separator_falls_back_to_blank_line(self) -> None:
        assert compose(PARTS, False, "") == "H1\n\nB1\n"

    def test_default_arguments(self) -> None:
        assert compose(PARTS) == "H1\n\nB1\n"


class TestNormalizeFileName:
    """normalize_file_name()."""

    def test_example(self) -> None:
        assert normalize_file_name("  Hello*/World  ") == "hello-world"

    def test_empty_becomes_ad(self) -> None:
        assert normalize_file_name("") == "ad"
        assert normalize_file_name("   \n\t ") == "ad"

    def test_truncates_to_forty_characters(self) -> None:
        slug = normalize_file_name("word " * 20)
        assert len(slug) <= 40
        assert slug.startswith("word-word")

    def test_keeps_allowed_punctuation(self) -> None:
        assert normalize_file_name("v1.2_final-cut") == "v1.2_final-cut"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("DM me ‘INFO’ now", "dm-me-info-now"),
            ("Tired?   Really!", "tired-really-"),
            ("***", "-"),
        ],
    )
    def test_invalid_characters_become_separators(self, text, expected) -> None:
        assert normalize_file_name(text) == expected


class TestFirstLine:
    """first_line()."""

    def test_skips_blank_lines(self) -> None:
        assert first_line("\n   \r\nHook line\nBody") == "Hook line"

    def test_all_blank_is_ad(self) -> None:
        assert first_line("\n\n") == "ad"
        assert first_line("") == "ad"


class TestEntryName:
    """entry_name()."""

    def test_zero_padded_to_total_width(self) -> None:
        assert entry_name(1, 12, "Hook\nBody\n") == "01_hook.txt"
        assert entry_name(7, 1000, "Hello World\n") == "0007_hello-world.txt"

    def test_single_digit_total(self) -> None:
        assert entry_name(3, 9, "x") == "3_x.txt"

    def test_blank_text_uses_fallback_slug(self) -> None:
        assert entry_name(2, 10, "\n") == "02_ad.txt"

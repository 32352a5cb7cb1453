"""Tests for content fingerprinting."""

import pytest

from horror_tales.story.content_hash import hash_content, normalize_content


class TestNormalizeContent:
    """Tests for normalize_content."""

    def test_lowercases(self):
        assert normalize_content("HeLLo") == "hello"

    def test_strips_all_whitespace(self):
        assert normalize_content(" a b\tc\nd\r\n e ") == "abcde"

    def test_empty(self):
        assert normalize_content("") == ""

    @pytest.mark.parametrize("separator", [
        "\ufeff", "\u00a0", "\u2003", "\u202f", "\u3000", "\v", "\f",
    ])
    def test_strips_browser_whitespace(self, separator):
        assert normalize_content(f"a{separator}b") == "ab"

    @pytest.mark.parametrize("separator", ["\x1c", "\x1d", "\x1e", "\x1f", "\u200b"])
    def test_keeps_characters_browsers_do_not_treat_as_whitespace(self, separator):
        assert normalize_content(f"a{separator}b") == f"a{separator}b"


class TestHashContent:
    """Tests for hash_content."""

    def test_empty_string_is_zero(self):
        assert hash_content("") == "0"

    def test_single_character(self):
        """'a' is 97 -> 0x61."""
        assert hash_content("a") == "61"

    def test_two_characters(self):
        """97 * 31 + 98 = 3105 -> 0xc21."""
        assert hash_content("ab") == "c21"

    def test_uses_utf16_code_units(self):
        """Astral characters hash as a surrogate pair (0xD83D, 0xDE00)."""
        assert hash_content("\U0001F600") == "1b0d63"

    def test_deterministic(self):
        text = "I heard the door open again, though I had locked it myself."
        assert hash_content(text) == hash_content(text)

    @pytest.mark.parametrize("text", [
        "Hello World",
        "The thing in the mirror smiled before I did. " * 40,
        "ÅNGSTRÖM ünïcödé",
        "\U0001F47B boo",
    ])
    def test_non_negative_hex(self, text):
        result = hash_content(text)
        assert result
        assert not result.startswith("-")
        int(result, 16)
        assert result == result.lower()

    def test_case_and_whitespace_collapse(self):
        assert hash_content("Hello World") == hash_content("helloworld")
        assert hash_content("  HELLO\n\tworld ") == hash_content("hello world")

    def test_different_words_differ(self):
        assert hash_content("the cellar door") != hash_content("the attic door")

    def test_long_text_wraps_to_32_bits(self):
        result = hash_content("x" * 5000)
        assert int(result, 16) <= 2 ** 31

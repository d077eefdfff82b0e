"""Tests for voxnav.core.text — normalization, wake word, vocabulary."""

from __future__ import annotations

from voxnav.core.text import (
    apply_vocab,
    collapse_whitespace,
    contains_wake_word,
    normalize_command,
    strip_wake_word,
)


class TestNormalizeCommand:
    def test_lowercases_and_collapses(self) -> None:
        assert normalize_command("  Go   HOME ") == "go home"

    def test_strips_terminal_punctuation(self) -> None:
        assert normalize_command("scroll down.") == "scroll down"
        assert normalize_command("open search?!") == "open search"

    def test_strips_courtesy_prefixes(self) -> None:
        assert normalize_command("could you apply filters motor") == "apply filters motor"
        assert normalize_command("please go home") == "go home"
        assert normalize_command("can you please open search") == "open search"

    def test_strips_trailing_please(self) -> None:
        assert normalize_command("go back please") == "go back"

    def test_courtesy_only_is_empty(self) -> None:
        assert normalize_command("please") == ""

    def test_keeps_inner_punctuation(self) -> None:
        assert normalize_command("apply filters vision, hearing") == "apply filters vision, hearing"


class TestWakeWord:
    def test_contains_is_case_insensitive(self) -> None:
        assert contains_wake_word("Hey Platform go home", "hey platform")
        assert not contains_wake_word("hey plat form go home", "hey platform")

    def test_strip_returns_remainder(self) -> None:
        assert strip_wake_word("Hey Platform, filter by motor", "hey platform") == "filter by motor"

    def test_strip_discards_text_before_wake_word(self) -> None:
        assert strip_wake_word("um okay hey platform go home", "hey platform") == "go home"

    def test_strip_absent_is_none(self) -> None:
        assert strip_wake_word("go home", "hey platform") is None

    def test_strip_bare_wake_word_is_empty(self) -> None:
        assert strip_wake_word("hey platform", "hey platform") == ""


class TestApplyVocab:
    def test_case_insensitive_replacement(self) -> None:
        assert apply_vocab("Hey Plat Form go home", {"hey plat form": "hey platform"}) == "hey platform go home"

    def test_multiple_replacements(self) -> None:
        vocab = {"hey plat form": "hey platform", "filter buy": "filter by"}
        assert apply_vocab("hey plat form filter buy motor", vocab) == "hey platform filter by motor"

    def test_empty_vocab_no_change(self) -> None:
        assert apply_vocab("hello world", {}) == "hello world"


def test_collapse_whitespace() -> None:
    assert collapse_whitespace(" a \t b\n c ") == "a b c"

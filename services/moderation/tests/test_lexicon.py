"""
Tests for the lexicon module.

Validates term de-duplication and ordering, whitelist handling, the
overlap check, and loading word lists from settings.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from vw_common.config import Settings

from moderation.lexicon import (
    DEFAULT_TERMS,
    DEFAULT_WHITELIST,
    Lexicon,
    LexiconEntry,
    LexiconError,
    build_lexicon,
    get_default_lexicon,
    load_wordlist,
)


class TestLexiconEntry:
    """Tests for LexiconEntry.from_term()."""

    def test_single_word(self) -> None:
        entry = LexiconEntry.from_term("Damn")
        assert entry.term == "Damn"
        assert entry.normalized == "damn"
        assert entry.stripped == "damn"
        assert entry.is_phrase is False

    def test_phrase(self) -> None:
        entry = LexiconEntry.from_term("what the hell")
        assert entry.is_phrase is True

    def test_masked_term_stripped(self) -> None:
        entry = LexiconEntry.from_term("f*ck")
        assert entry.normalized == "f*ck"
        assert entry.stripped == "fck"


class TestLexicon:
    """Tests for Lexicon."""

    def test_keeps_insertion_order(self) -> None:
        lex = Lexicon(["b", "a", "c"])
        assert lex.terms == ("b", "a", "c")

    def test_deduplicates_first_wins(self) -> None:
        lex = Lexicon(["crap", "damn", "crap", " damn "])
        assert lex.terms == ("crap", "damn")
        assert len(lex) == 2

    def test_blank_terms_dropped(self) -> None:
        lex = Lexicon(["", "  ", "crap"])
        assert lex.terms == ("crap",)

    def test_empty_raises(self) -> None:
        with pytest.raises(LexiconError):
            Lexicon([])

    def test_whitelist_overlap_raises(self) -> None:
        with pytest.raises(LexiconError, match="damn"):
            Lexicon(["damn", "crap"], ["DAMN"])

    def test_lexicon_error_is_value_error(self) -> None:
        assert issubclass(LexiconError, ValueError)

    def test_whitelist_normalized(self) -> None:
        lex = Lexicon(["ass"], ["Classic"])
        assert lex.whitelist == frozenset({"classic"})

    def test_is_whitelisted_substring(self) -> None:
        lex = Lexicon(["ass"], ["classic"])
        assert lex.is_whitelisted("classical") is True
        assert lex.is_whitelisted("class") is False

    def test_contains_normalizes(self) -> None:
        lex = Lexicon(["damn"])
        assert "DAMN" in lex
        assert "darn" not in lex
        assert 42 not in lex

    def test_repr(self) -> None:
        assert repr(Lexicon(["a", "b"], ["c"])) == "Lexicon(terms=2, whitelist=1)"

    def test_default_lists_are_disjoint(self) -> None:
        lex = get_default_lexicon()
        assert len(lex) == len(set(DEFAULT_TERMS))
        assert lex.whitelist == frozenset(DEFAULT_WHITELIST)

    def test_default_is_cached(self) -> None:
        assert get_default_lexicon() is get_default_lexicon()


class TestWordlists:
    """Tests for load_wordlist() and build_lexicon()."""

    def test_load_wordlist_skips_comments_and_blanks(self, tmp_path: Path) -> None:
        path = tmp_path / "terms.txt"
        path.write_text("# comment\nfoo\n\n  bar  \n   # indented comment\n", encoding="utf-8")
        assert load_wordlist(path) == ["foo", "bar"]

    def test_build_defaults(self) -> None:
        lex = build_lexicon(Settings(_env_file=None, lexicon_path="", whitelist_path=""))
        assert lex.terms == get_default_lexicon().terms

    def test_build_from_files(self, tmp_path: Path) -> None:
        terms = tmp_path / "terms.txt"
        terms.write_text("scoundrel\nvillain\n", encoding="utf-8")
        safe = tmp_path / "safe.txt"
        safe.write_text("villainous\n", encoding="utf-8")

        lex = build_lexicon(
            Settings(_env_file=None, lexicon_path=str(terms), whitelist_path=str(safe))
        )
        assert lex.terms == ("scoundrel", "villain")
        assert lex.whitelist == frozenset({"villainous"})

    def test_build_custom_terms_default_whitelist(self, tmp_path: Path) -> None:
        terms = tmp_path / "terms.txt"
        terms.write_text("scoundrel\n", encoding="utf-8")
        lex = build_lexicon(Settings(_env_file=None, lexicon_path=str(terms), whitelist_path=""))
        assert lex.whitelist == frozenset(DEFAULT_WHITELIST)

    def test_build_overlap_raises(self, tmp_path: Path) -> None:
        terms = tmp_path / "terms.txt"
        terms.write_text("classic\n", encoding="utf-8")
        with pytest.raises(LexiconError):
            build_lexicon(Settings(_env_file=None, lexicon_path=str(terms), whitelist_path=""))

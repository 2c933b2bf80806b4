"""
Tests for the batch detector module.

Validates token offsets, ordering, the short-circuiting yes/no check, and
span highlighting that reproduces the input text.
"""

from __future__ import annotations

import pytest

from moderation.batch_detector import BatchDetector, Match, Span, iter_tokens
from moderation.lexicon import DEFAULT_WHITELIST


class TestIterTokens:
    """Tests for iter_tokens()."""

    def test_offsets(self) -> None:
        assert list(iter_tokens("  a bb\tccc\n")) == [(2, "a"), (4, "bb"), (7, "ccc")]

    def test_empty(self) -> None:
        assert list(iter_tokens("")) == []
        assert list(iter_tokens(" \n\t ")) == []


class TestDetect:
    """Tests for BatchDetector.detect()."""

    def test_offset_of_match(self, detector: BatchDetector) -> None:
        matches = detector.detect("you are an ass today")
        assert matches == [
            Match(source_text="ass", offset=11, length=3, score=1.0, lexicon_entry="ass")
        ]

    def test_repeated_token_offsets(self, detector: BatchDetector) -> None:
        matches = detector.detect("ass and ass")
        assert [m.offset for m in matches] == [0, 8]

    def test_source_text_keeps_punctuation(self, detector: BatchDetector) -> None:
        text = "What the hell, shit."
        matches = detector.detect(text)
        assert len(matches) == 1
        m = matches[0]
        assert m.source_text == "shit."
        assert text[m.offset:m.end] == "shit."
        assert m.lexicon_entry == "shit"

    def test_offsets_are_code_points(self, detector: BatchDetector) -> None:
        text = "héllo ass"
        (m,) = detector.detect(text)
        assert m.offset == 6
        assert text[m.offset:m.end] == "ass"

    def test_ascending_order(self, detector: BatchDetector) -> None:
        matches = detector.detect("crap, this damn thing is bullshit")
        offsets = [m.offset for m in matches]
        assert offsets == sorted(offsets)
        assert [m.lexicon_entry for m in matches] == ["crap", "damn", "bullshit"]

    def test_scores_meet_threshold(self, detector: BatchDetector) -> None:
        for m in detector.detect("f*ck this sh1t you b4stard motherfuckr"):
            expected = 0.95 if m.length <= 6 else 0.85
            assert m.score >= expected

    def test_clean_text(self, detector: BatchDetector) -> None:
        assert detector.detect("the quick brown fox") == []

    def test_empty(self, detector: BatchDetector) -> None:
        assert detector.detect("") == []


class TestHasProfanity:
    """Tests for BatchDetector.has_profanity()."""

    def test_true(self, detector: BatchDetector) -> None:
        assert detector.has_profanity("well that is crap") is True

    def test_false(self, detector: BatchDetector) -> None:
        assert detector.has_profanity("hello world") is False

    @pytest.mark.parametrize("word", DEFAULT_WHITELIST)
    def test_whitelist_never_flagged(self, detector: BatchDetector, word: str) -> None:
        assert detector.has_profanity(word) is False
        assert detector.has_profanity(word.upper()) is False

    def test_empty(self, detector: BatchDetector) -> None:
        assert detector.has_profanity("") is False


class TestHighlight:
    """Tests for BatchDetector.highlight()."""

    def test_spans(self, detector: BatchDetector) -> None:
        assert detector.highlight("you are an ass today") == [
            Span(text="you are an ", is_profanity=False),
            Span(text="ass", is_profanity=True, score=1.0),
            Span(text=" today", is_profanity=False),
        ]

    def test_clean_text_single_span(self, detector: BatchDetector) -> None:
        assert detector.highlight("all good") == [Span(text="all good", is_profanity=False)]

    def test_empty(self, detector: BatchDetector) -> None:
        assert detector.highlight("") == []

    def test_profanity_at_edges(self, detector: BatchDetector) -> None:
        spans = detector.highlight("damn it crap")
        assert spans[0] == Span(text="damn", is_profanity=True, score=1.0)
        assert spans[-1] == Span(text="crap", is_profanity=True, score=1.0)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "you are an ass today",
            "  leading and trailing damn  ",
            "crap\ncrap\tcrap",
            "sh1t, f*ck!! and more b1tch",
            "nothing to see here",
            "ünïcödé ass ñ",
        ],
    )
    def test_spans_reproduce_text(self, detector: BatchDetector, text: str) -> None:
        assert "".join(s.text for s in detector.highlight(text)) == text

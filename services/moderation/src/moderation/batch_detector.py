"""
Batch profanity detection for VoiceWarden.

Walks a finished text token by token, scores each whitespace-delimited
token with the lexicon matcher, and reports matches with their offsets
in the original text.  Also splits text into highlighted spans for
display and offers a short-circuiting yes/no check.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

from moderation.lexicon import Lexicon
from moderation.lexicon_matcher import LexiconMatcher

_TOKEN_RE = re.compile(r"\S+")


@dataclass(frozen=True)
class Match:
    """A detected profane token.

    Attributes:
        source_text: The token exactly as it appears in the text.
        offset: Index of the token's first character in the text.
        length: Token length in characters.
        score: Similarity score; never below the token's decision threshold.
        lexicon_entry: Lexicon term that matched.
    """

    source_text: str
    offset: int
    length: int
    score: float
    lexicon_entry: str

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class Span:
    """A slice of the original text tagged as profane or clean."""

    text: str
    is_profanity: bool
    score: float | None = None


def iter_tokens(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(offset, token)`` for each whitespace-delimited token of *text*.

    Tokens are located scanning forward only, so a spelling that recurs
    earlier in the text never shifts a later token's offset.
    """
    for m in _TOKEN_RE.finditer(text):
        yield m.start(), m.group()


class BatchDetector:
    """Token-level profanity detector for complete texts.

    Args:
        lexicon: Shared read-only lexicon; defaults to the built-in one.
        matcher: Pre-built matcher (takes precedence over *lexicon*).
    """

    def __init__(
        self,
        lexicon: Lexicon | None = None,
        matcher: LexiconMatcher | None = None,
    ) -> None:
        self._matcher = matcher or LexiconMatcher(lexicon)

    @property
    def matcher(self) -> LexiconMatcher:
        return self._matcher

    def detect(self, text: str) -> list[Match]:
        """Return all profane tokens of *text* in ascending offset order."""
        matches: list[Match] = []
        for offset, token in iter_tokens(text):
            result = self._matcher.evaluate(token)
            if result is None:
                continue
            matches.append(
                Match(
                    source_text=token,
                    offset=offset,
                    length=len(token),
                    score=result.score,
                    lexicon_entry=result.entry or "",
                )
            )
        return matches

    def has_profanity(self, text: str) -> bool:
        """``True`` as soon as one token of *text* qualifies."""
        return any(self._matcher.evaluate(t) is not None for _, t in iter_tokens(text))

    def highlight(self, text: str) -> list[Span]:
        """Split *text* into profane and clean spans.

        Concatenating the span texts in order reproduces *text* exactly.
        """
        matches = sorted(self.detect(text), key=lambda m: m.offset)
        if not matches:
            return [Span(text=text, is_profanity=False)] if text else []

        spans: list[Span] = []
        cursor = 0
        for m in matches:
            if m.offset < cursor:
                continue
            if m.offset > cursor:
                spans.append(Span(text=text[cursor:m.offset], is_profanity=False))
            spans.append(Span(text=text[m.offset:m.end], is_profanity=True, score=m.score))
            cursor = m.end
        if cursor < len(text):
            spans.append(Span(text=text[cursor:], is_profanity=False))
        return spans

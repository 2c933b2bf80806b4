"""
Lexicon matcher for VoiceWarden.

Scores one candidate word or phrase against every lexicon entry and
returns the best entry.  Whitelisted candidates score zero, multi-word
entries contained in the candidate are authoritative, and the scan stops
as soon as a near-certain fuzzy score is reached.
"""

from __future__ import annotations

from dataclasses import dataclass

from moderation.lexicon import Lexicon, get_default_lexicon
from moderation.normalizer import collapse_repeats, leet_unmask, normalize, strip_punct
from moderation.similarity import UNMASKED_SCORE, similarity

SHORT_WORD_MAX_LEN = 6
SHORT_WORD_THRESHOLD = 0.95
LONG_WORD_THRESHOLD = 0.85


def decision_threshold(word: str) -> float:
    """Score a candidate must reach to be reported.

    Short words need near-exact matches; a couple of edits can turn a short
    innocuous word into a short slur lookalike.
    """
    return SHORT_WORD_THRESHOLD if len(word) <= SHORT_WORD_MAX_LEN else LONG_WORD_THRESHOLD


@dataclass(frozen=True)
class Candidate:
    """A raw substring under evaluation and its position in the source text."""

    raw: str
    normalized: str
    offset: int = 0

    @property
    def length(self) -> int:
        return len(self.raw)


@dataclass(frozen=True)
class MatcherResult:
    """Best lexicon entry for a candidate.

    Attributes:
        score: Similarity in ``[0, 1]``.
        entry: Matching lexicon term, or ``None`` if nothing scored.
    """

    score: float
    entry: str | None

    def is_match(self, raw: str) -> bool:
        """Whether this result clears the threshold for candidate *raw*."""
        return self.entry is not None and self.score >= decision_threshold(raw)


NO_MATCH = MatcherResult(score=0.0, entry=None)


class LexiconMatcher:
    """Finds the best-scoring lexicon entry for a candidate string.

    Args:
        lexicon: Shared read-only lexicon; defaults to the built-in one.
    """

    def __init__(self, lexicon: Lexicon | None = None) -> None:
        self._lexicon = lexicon or get_default_lexicon()

    @property
    def lexicon(self) -> Lexicon:
        return self._lexicon

    def candidate(self, raw: str, offset: int = 0) -> Candidate:
        """Normalize *raw* (case fold, zero-width strip, repeat collapse)."""
        return Candidate(raw=raw, normalized=collapse_repeats(normalize(raw)), offset=offset)

    def match(self, raw: str) -> MatcherResult:
        """Return the best lexicon entry for *raw* with its score."""
        norm = self.candidate(raw).normalized
        if not norm or self._lexicon.is_whitelisted(norm):
            return NO_MATCH

        letters = strip_punct(leet_unmask(norm))
        best = NO_MATCH
        for entry in self._lexicon.entries:
            if entry.is_phrase and entry.normalized in norm:
                return MatcherResult(score=1.0, entry=entry.term)

            score = similarity(letters, entry.stripped)
            if score > best.score:
                best = MatcherResult(score=score, entry=entry.term)
            if best.score >= UNMASKED_SCORE:
                break
        return best

    def evaluate(self, raw: str) -> MatcherResult | None:
        """Return the match for *raw* only if it clears its decision threshold."""
        result = self.match(raw)
        return result if result.is_match(raw) else None

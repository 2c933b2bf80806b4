"""
Edit-distance similarity scoring for VoiceWarden.

Wraps RapidFuzz's optimal-string-alignment distance (Damerau–Levenshtein
with adjacent transpositions) and turns it into a 0–1 similarity between
a candidate token and a lexicon entry.
"""

from __future__ import annotations

from rapidfuzz.distance import OSA

from moderation.normalizer import leet_unmask, strip_punct

EXACT_SCORE = 1.0
UNMASKED_SCORE = 0.98


def distance(a: str, b: str) -> int:
    """Edit distance counting insert, delete, substitute, and adjacent swap as 1."""
    return int(OSA.distance(a, b))


def similarity(token: str, entry: str) -> float:
    """Score how closely *token* resembles lexicon *entry*.

    Args:
        token: Candidate text (already normalized by the caller).
        entry: Lexicon term or phrase.

    Returns:
        ``1.0`` for identical strings, ``0.98`` when they agree once leet
        characters are unmasked and punctuation is stripped, otherwise
        ``1 - distance / longest_length`` floored at zero.
    """
    if token == entry:
        return EXACT_SCORE

    stripped_token = strip_punct(leet_unmask(token))
    stripped_entry = strip_punct(leet_unmask(entry))

    if not stripped_token and not stripped_entry:
        return 0.0
    if stripped_token == stripped_entry:
        return UNMASKED_SCORE

    longest = max(len(stripped_token), len(stripped_entry))
    return max(0.0, 1.0 - distance(stripped_token, stripped_entry) / longest)

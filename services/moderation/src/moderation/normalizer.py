"""
Text canonicalization for the VoiceWarden moderation engine.

Provides the normalization stages applied before lexicon matching:
Unicode NFKC normalization, zero-width character stripping, case folding,
repeated-character collapsing, leet-speak unmasking, and punctuation
stripping.  Every function is total over arbitrary strings.
"""

from __future__ import annotations

import re
import unicodedata

# Zero-width space/joiners, directional marks, and the BOM.
_ZERO_WIDTH_RE = re.compile("[\u200b-\u200f\ufeff]")
_REPEAT_RE = re.compile(r"(.)\1{2,}")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9\s]")

LEET_MAP: dict[str, str] = {
    "4": "a",
    "@": "a",
    "3": "e",
    "1": "i",
    "!": "i",
    "|": "i",
    "0": "o",
    "5": "s",
    "$": "s",
    "7": "t",
    "8": "b",
}
_LEET_TABLE = str.maketrans(LEET_MAP)


def normalize(text: str) -> str:
    """Return the canonical form of *text*.

    Applies NFKC, drops zero-width characters, and lower-cases.  A second
    NFKC pass keeps the result stable under repeated application.
    """
    if not text:
        return ""
    folded = _ZERO_WIDTH_RE.sub("", unicodedata.normalize("NFKC", text)).lower()
    return _ZERO_WIDTH_RE.sub("", unicodedata.normalize("NFKC", folded))


def collapse_repeats(text: str, max_run: int = 2) -> str:
    """Collapse runs of three or more identical characters to *max_run*.

    ``"loooooool"`` becomes ``"lool"``.
    """
    return _REPEAT_RE.sub(lambda m: m.group(1) * max_run, text)


def leet_unmask(text: str) -> str:
    """Replace leet-speak characters with the letters they imitate."""
    return text.translate(_LEET_TABLE)


def strip_punct(text: str) -> str:
    """Remove everything except ASCII letters, digits, and whitespace."""
    return _NON_ALNUM_RE.sub("", text)

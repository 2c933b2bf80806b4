"""
Language policy checks for VoiceWarden.

Flags segments whose recognised language differs from the allowed one,
and splits mixed-script text into highlighted runs.  Script detection is
a per-character classifier over fixed Unicode blocks; run merging is a
separate pass over ``(char, tag)`` pairs.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Hashable, Iterable, Sequence, TypeVar

from vw_common.models import FlagRecord, FlagType, Segment

CONTEXT_CHARS = 100

K = TypeVar("K", bound=Hashable)


class ScriptTag(str, enum.Enum):
    """Writing system of a single character."""

    LATIN = "latin"
    DEVANAGARI = "devanagari"
    ARABIC = "arabic"
    CJK = "cjk"
    HANGUL = "hangul"
    OTHER = "other"


# (first, last, tag) code-point blocks, checked in order.
_SCRIPT_BLOCKS: tuple[tuple[int, int, ScriptTag], ...] = (
    (0x0041, 0x005A, ScriptTag.LATIN),
    (0x0061, 0x007A, ScriptTag.LATIN),
    (0x00C0, 0x024F, ScriptTag.LATIN),
    (0x0600, 0x06FF, ScriptTag.ARABIC),
    (0x0900, 0x097F, ScriptTag.DEVANAGARI),
    (0x3040, 0x309F, ScriptTag.CJK),  # Hiragana
    (0x30A0, 0x30FF, ScriptTag.CJK),  # Katakana
    (0x4E00, 0x9FFF, ScriptTag.CJK),
    (0xAC00, 0xD7AF, ScriptTag.HANGUL),
)

NON_LATIN_SCRIPTS: frozenset[ScriptTag] = frozenset(
    {ScriptTag.DEVANAGARI, ScriptTag.ARABIC, ScriptTag.CJK, ScriptTag.HANGUL}
)


def classify_script(char: str) -> ScriptTag:
    """Return the :class:`ScriptTag` of the single character *char*."""
    if len(char) != 1:
        return ScriptTag.OTHER
    cp = ord(char)
    for first, last, tag in _SCRIPT_BLOCKS:
        if first <= cp <= last:
            return tag
    return ScriptTag.OTHER


def merge_runs(pairs: Iterable[tuple[str, K]]) -> list[tuple[str, K]]:
    """Merge adjacent ``(text, key)`` pairs that share a key.

    >>> merge_runs([("a", 1), ("b", 1), ("c", 2)])
    [('ab', 1), ('c', 2)]
    """
    runs: list[tuple[str, K]] = []
    for text, key in pairs:
        if runs and runs[-1][1] == key:
            runs[-1] = (runs[-1][0] + text, key)
        else:
            runs.append((text, key))
    return runs


def script_runs(text: str) -> list[tuple[str, ScriptTag]]:
    """Split *text* into maximal runs of one script."""
    return merge_runs((ch, classify_script(ch)) for ch in text)


@dataclass(frozen=True)
class LanguageSpan:
    """A slice of text tagged as violating the language policy or not."""

    text: str
    is_language_violation: bool


def _same_language(a: str | None, b: str) -> bool:
    return a is None or a == "" or a.lower() == b.lower()


def highlight_language_violations(
    text: str,
    segment_language: str | None,
    allowed_language: str = "en",
) -> list[LanguageSpan]:
    """Mark the non-Latin-script portions of a segment in a foreign language.

    Args:
        text: Segment text.
        segment_language: Language the recognizer reported for the segment.
        allowed_language: Language speakers should use.

    Returns:
        Spans that partition *text*.  A single clean span when the segment
        language is allowed or no non-Latin run is present.
    """
    if _same_language(segment_language, allowed_language):
        return [LanguageSpan(text=text, is_language_violation=False)]

    runs = merge_runs((ch, classify_script(ch) in NON_LATIN_SCRIPTS) for ch in text)
    if not any(flag for _, flag in runs):
        return [LanguageSpan(text=text, is_language_violation=False)]
    return [LanguageSpan(text=run, is_language_violation=flag) for run, flag in runs]


def detect_language_policy_violations(
    segments: Sequence[Segment],
    transcript_id: str = "",
    allowed_language: str = "en",
) -> list[FlagRecord]:
    """Flag each segment whose declared language is not *allowed_language*.

    Segments without a language are never flagged.  The flagged word is
    the detected language code.
    """
    violations: list[FlagRecord] = []
    for segment in segments:
        if _same_language(segment.language, allowed_language):
            continue
        violations.append(
            FlagRecord(
                transcript_id=transcript_id,
                flagged_word=segment.language or "",
                context=segment.text[:CONTEXT_CHARS],
                timestamp_ms=segment.start_ms,
                speaker=segment.speaker,
                flag_type=FlagType.LANGUAGE_POLICY,
            )
        )
    return violations

"""
Profanity lexicon and whitelist for VoiceWarden.

The lexicon is built once at start-up (from the built-in lists or from
word-list files named in settings) and then shared read-only by every
detector.  Entry order is fixed so the first entry to reach a
near-certain score always wins ties.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable

import structlog

from vw_common.config import Settings, get_settings

from moderation.normalizer import normalize, strip_punct

logger = structlog.get_logger()

DEFAULT_TERMS: tuple[str, ...] = (
    "fuck", "fucks", "fucked", "fucking", "motherfucker", "mf",
    "what the fuck", "what the hell", "what the shit", "what the ass",
    "what the dick", "what the cock", "what the pussy",
    "shit", "shitty", "bullshit", "wtf", "tf", "stfu", "gtfo",
    "ass", "asshole", "dumbass", "jackass",
    "bitch", "bitches", "bastard",
    "dick", "dicks", "dickhead",
    "cock", "cocks", "cocksucker",
    "pussy", "slut", "whore",
    "crap", "damn", "dammit",
    "suck my dick", "go to hell", "screw you",
    "fuk", "f*ck", "f**k", "fu", "fukn", "fkn", "fkin", "fking",
    "sht", "sh*t", "sh**", "af",
)

DEFAULT_WHITELIST: tuple[str, ...] = ("assess", "classic", "passion", "scunthorpe")


class LexiconError(ValueError):
    """Raised when a lexicon configuration is unusable."""


@dataclass(frozen=True)
class LexiconEntry:
    """One lexicon term with its precomputed match forms.

    Attributes:
        term: The term as configured (reported back on a match).
        normalized: ``normalize(term)``; used for phrase containment.
        stripped: Punctuation-stripped normalized form; used for fuzzy scoring.
        is_phrase: Whether the normalized term contains a space.
    """

    term: str
    normalized: str
    stripped: str
    is_phrase: bool

    @classmethod
    def from_term(cls, term: str) -> LexiconEntry:
        normalized = normalize(term)
        return cls(
            term=term,
            normalized=normalized,
            stripped=strip_punct(normalized),
            is_phrase=" " in normalized,
        )


class Lexicon:
    """Immutable, ordered set of offensive terms plus a disjoint whitelist.

    Args:
        terms: Offensive words and phrases in priority order.  Duplicates
            and blank entries are dropped; first occurrence wins.
        whitelist: Safe words that suppress a candidate containing them.

    Raises:
        LexiconError: If no terms remain or the whitelist overlaps the terms.
    """

    __slots__ = ("_entries", "_whitelist")

    def __init__(self, terms: Iterable[str], whitelist: Iterable[str] = ()) -> None:
        unique_terms = dict.fromkeys(t.strip() for t in terms if t and t.strip())
        if not unique_terms:
            raise LexiconError("lexicon must contain at least one term")

        entries = tuple(LexiconEntry.from_term(t) for t in unique_terms)
        safe = frozenset(
            normalize(w.strip()) for w in whitelist if w and w.strip()
        )

        overlap = sorted(safe & {e.normalized for e in entries})
        if overlap:
            raise LexiconError(f"whitelist overlaps lexicon: {', '.join(overlap)}")

        self._entries = entries
        self._whitelist = safe

    @property
    def entries(self) -> tuple[LexiconEntry, ...]:
        """Entries in the fixed iteration order."""
        return self._entries

    @property
    def whitelist(self) -> frozenset[str]:
        """Normalized whitelist terms."""
        return self._whitelist

    @property
    def terms(self) -> tuple[str, ...]:
        """Configured terms in the fixed iteration order."""
        return tuple(e.term for e in self._entries)

    def is_whitelisted(self, normalized_candidate: str) -> bool:
        """``True`` if any whitelist term occurs inside *normalized_candidate*."""
        return any(w in normalized_candidate for w in self._whitelist)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and any(
            e.normalized == normalize(term) for e in self._entries
        )

    def __repr__(self) -> str:
        return f"Lexicon(terms={len(self._entries)}, whitelist={len(self._whitelist)})"


def load_wordlist(path: str | Path) -> list[str]:
    """Read one term per line, skipping blank lines and ``#`` comments."""
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    return [ln.strip() for ln in lines if ln.strip() and not ln.lstrip().startswith("#")]


def build_lexicon(settings: Settings | None = None) -> Lexicon:
    """Build the lexicon named by *settings*, falling back to the built-in lists.

    Args:
        settings: Settings to read ``lexicon_path``/``whitelist_path`` from;
            defaults to :func:`get_settings`.

    Returns:
        A ready-to-share :class:`Lexicon`.
    """
    settings = settings or get_settings()
    terms: Iterable[str] = DEFAULT_TERMS
    whitelist: Iterable[str] = DEFAULT_WHITELIST

    if settings.lexicon_path:
        terms = load_wordlist(settings.lexicon_path)
    if settings.whitelist_path:
        whitelist = load_wordlist(settings.whitelist_path)

    lexicon = Lexicon(terms, whitelist)
    logger.info(
        "lexicon_loaded",
        terms=len(lexicon),
        whitelist=len(lexicon.whitelist),
        custom_terms=bool(settings.lexicon_path),
        custom_whitelist=bool(settings.whitelist_path),
    )
    return lexicon


@lru_cache(maxsize=1)
def get_default_lexicon() -> Lexicon:
    """Return the process-wide lexicon built from the built-in lists."""
    return Lexicon(DEFAULT_TERMS, DEFAULT_WHITELIST)

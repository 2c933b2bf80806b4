"""
Live sliding-window profanity detection for VoiceWarden.

Keeps the last N tokens of one typed or transcribed stream and, each time
a token arrives, scores the phrases ending at that token.  Multi-word
lexicon entries fire as soon as their last word arrives, without
reprocessing the transcript.
"""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass

import structlog

from vw_common.models import Severity

from moderation.lexicon import Lexicon
from moderation.lexicon_matcher import LexiconMatcher

logger = structlog.get_logger()

DEFAULT_WINDOW_SIZE: int = 8
HIGH_SEVERITY_SCORE: float = 0.95

_SPLIT_RE = re.compile(r"(\s+)")


@dataclass(frozen=True)
class LiveDetection:
    """A phrase that crossed its threshold in a live stream.

    Attributes:
        phrase: Window suffix that matched (tokens joined by single spaces).
        match: Lexicon entry it matched.
        score: Similarity score.
        severity: ``high`` at 0.95 or above, else ``medium``.
    """

    phrase: str
    match: str
    score: float
    severity: Severity


class LiveWindowDetector:
    """Per-stream sliding window over incoming text chunks.

    One instance serves exactly one stream; callers must not run two
    :meth:`ingest` calls on the same instance concurrently.  Instances
    share only the read-only lexicon.

    Args:
        window_size: Maximum number of recent tokens kept.
        lexicon: Shared read-only lexicon; defaults to the built-in one.
        matcher: Pre-built matcher (takes precedence over *lexicon*).
    """

    def __init__(
        self,
        window_size: int = DEFAULT_WINDOW_SIZE,
        lexicon: Lexicon | None = None,
        matcher: LexiconMatcher | None = None,
    ) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be positive, got {window_size}")
        self._window_size = window_size
        self._matcher = matcher or LexiconMatcher(lexicon)
        self._tokens: deque[str] = deque(maxlen=window_size)

    # ── public API ──

    def ingest(self, chunk: str) -> list[LiveDetection]:
        """Feed one chunk of text and return the detections it completed.

        Args:
            chunk: Arbitrary text; may hold zero, one, or many tokens.

        Returns:
            At most one detection per token in *chunk*, in arrival order.
        """
        detections: list[LiveDetection] = []
        for piece in _SPLIT_RE.split(chunk):
            if not piece or piece.isspace():
                continue
            self._tokens.append(piece)
            detection = self._scan()
            if detection is not None:
                detections.append(detection)
        return detections

    def reset(self) -> None:
        """Forget every buffered token."""
        self._tokens.clear()

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def tokens(self) -> tuple[str, ...]:
        """Buffered tokens, oldest first."""
        return tuple(self._tokens)

    # ── internal ──

    def _scan(self) -> LiveDetection | None:
        """Score window suffixes shortest first; return the first that qualifies."""
        window = list(self._tokens)
        for length in range(1, len(window) + 1):
            phrase = " ".join(window[-length:])
            result = self._matcher.evaluate(phrase)
            if result is None or result.entry is None:
                continue
            severity = Severity.HIGH if result.score >= HIGH_SEVERITY_SCORE else Severity.MEDIUM
            logger.debug(
                "live_phrase_detected",
                phrase=phrase,
                match=result.entry,
                score=result.score,
                severity=severity.value,
            )
            return LiveDetection(
                phrase=phrase,
                match=result.entry,
                score=result.score,
                severity=severity,
            )
        return None

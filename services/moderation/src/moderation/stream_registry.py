"""
Per-stream live detector bookkeeping for VoiceWarden.

Creates one LiveWindowDetector per logical stream on first use, routes
chunks to it, and discards it when the stream ends or goes idle.
Detectors of different streams share nothing mutable, only the
read-only lexicon.
"""

from __future__ import annotations

import time
from typing import Callable

import structlog

from moderation.lexicon import Lexicon
from moderation.lexicon_matcher import LexiconMatcher
from moderation.live_detector import DEFAULT_WINDOW_SIZE, LiveDetection, LiveWindowDetector

logger = structlog.get_logger()


class LiveStreamRegistry:
    """Maps stream ids to their own :class:`LiveWindowDetector`.

    Args:
        window_size: Window size used for newly created detectors.
        lexicon: Shared read-only lexicon; defaults to the built-in one.
        idle_timeout_s: Streams without a chunk for this long are dropped
            by :meth:`expire_idle`.  ``None`` keeps streams until ended.
        clock: Monotonic time source in seconds.
    """

    def __init__(
        self,
        window_size: int = DEFAULT_WINDOW_SIZE,
        lexicon: Lexicon | None = None,
        idle_timeout_s: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._window_size = window_size
        self._matcher = LexiconMatcher(lexicon)
        self._idle_timeout_s = idle_timeout_s
        self._clock = clock
        self._detectors: dict[str, LiveWindowDetector] = {}
        self._last_seen: dict[str, float] = {}

    def detector(self, stream_id: str, window_size: int | None = None) -> LiveWindowDetector:
        """Return the detector for *stream_id*, creating it if needed.

        *window_size* only applies when the detector is created.
        """
        det = self._detectors.get(stream_id)
        if det is None:
            det = LiveWindowDetector(
                window_size=window_size or self._window_size,
                matcher=self._matcher,
            )
            self._detectors[stream_id] = det
            logger.info("live_stream_started", stream_id=stream_id, window_size=det.window_size)
        self._last_seen[stream_id] = self._clock()
        return det

    def ingest(
        self,
        stream_id: str,
        chunk: str,
        window_size: int | None = None,
    ) -> list[LiveDetection]:
        """Route *chunk* to the detector of *stream_id*."""
        detections = self.detector(stream_id, window_size).ingest(chunk)
        if detections:
            logger.info(
                "live_detections",
                stream_id=stream_id,
                count=len(detections),
                phrases=[d.phrase for d in detections],
            )
        return detections

    def end_stream(self, stream_id: str) -> bool:
        """Reset and drop the detector of *stream_id*.

        Returns:
            ``True`` if the stream was known.
        """
        det = self._detectors.pop(stream_id, None)
        self._last_seen.pop(stream_id, None)
        if det is None:
            return False
        det.reset()
        logger.info("live_stream_ended", stream_id=stream_id)
        return True

    def expire_idle(self) -> list[str]:
        """End every stream idle for longer than the idle timeout.

        Returns:
            Ids of the streams that were ended.
        """
        if self._idle_timeout_s is None:
            return []
        cutoff = self._clock() - self._idle_timeout_s
        expired = [sid for sid, seen in self._last_seen.items() if seen < cutoff]
        for stream_id in expired:
            self.end_stream(stream_id)
        if expired:
            logger.info("live_streams_expired", count=len(expired), stream_ids=expired)
        return expired

    @property
    def active_streams(self) -> list[str]:
        """Ids of streams with a live detector."""
        return list(self._detectors)

"""
Moderation service entry point for VoiceWarden.

Builds the lexicon, the live stream registry, the flag validator, and
the alert publisher, then exposes batch detection, live ingestion,
session analysis, and flag review over HTTP.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import structlog
import uvicorn
from fastapi import FastAPI, HTTPException

from vw_common.config import get_settings
from vw_common.logging import configure_logging
from vw_common.messaging.redis_client import RedisClient
from vw_common.models import ModerationFlags

from moderation import health, orchestrator
from moderation.alert_publisher import AlertPublisher
from moderation.batch_detector import BatchDetector
from moderation.content_analyzer import analyze_content
from moderation.lexicon import Lexicon, build_lexicon
from moderation.schemas import AnalyzeRequest, IngestRequest, ReviewRequest, TextRequest
from moderation.stream_registry import LiveStreamRegistry
from moderation.validator import ChatCompletionValidator, FlagValidator

logger = structlog.get_logger()

# ── service singletons (set during lifespan) ──
_lexicon: Lexicon | None = None
_detector: BatchDetector | None = None
_registry: LiveStreamRegistry | None = None
_validator: FlagValidator | None = None
_redis: RedisClient | None = None
_publisher: AlertPublisher | None = None
_stream_locks: dict[str, asyncio.Lock] = {}


def _require_detector() -> BatchDetector:
    if _detector is None:
        raise HTTPException(status_code=503, detail="Moderation engine not ready")
    return _detector


def _require_registry() -> LiveStreamRegistry:
    if _registry is None:
        raise HTTPException(status_code=503, detail="Moderation engine not ready")
    return _registry


async def _connect_publisher(redis: RedisClient) -> AlertPublisher | None:
    """Connect Redis for alerts; the service runs without alerts if it is down."""
    try:
        await redis.connect()
        if not await redis.health_check():
            raise ConnectionError("ping failed")
    except Exception as exc:  # noqa: BLE001
        logger.warning("alert_channel_unavailable", error=str(exc))
        return None
    return AlertPublisher(redis)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """FastAPI lifespan: build engines and connect Redis, then clean up."""
    global _lexicon, _detector, _registry, _validator, _redis, _publisher

    settings = get_settings()
    configure_logging("moderation", settings.log_level, settings.log_json)
    logger.info("moderation_service_starting")

    _lexicon = build_lexicon(settings)
    _detector = BatchDetector(_lexicon)
    _registry = LiveStreamRegistry(
        settings.window_size,
        _lexicon,
        idle_timeout_s=settings.stream_idle_timeout_s,
    )
    _validator = ChatCompletionValidator()

    _redis = RedisClient(settings.redis_url)
    _publisher = await _connect_publisher(_redis)

    health.configure(_lexicon, _registry, _validator, _redis if _publisher else None)

    logger.info(
        "moderation_service_ready",
        lexicon_terms=len(_lexicon),
        window_size=settings.window_size,
        validator_configured=_validator.is_configured,
        alerts_enabled=_publisher is not None,
    )
    yield

    # Shutdown
    logger.info("moderation_service_stopping")
    if _registry:
        for stream_id in _registry.active_streams:
            _registry.end_stream(stream_id)
    _stream_locks.clear()
    if _validator:
        await _validator.close()
    if _redis:
        await _redis.close()
    _publisher = None
    logger.info("moderation_service_stopped")


app = FastAPI(title="VoiceWarden Moderation Service", lifespan=lifespan)
app.include_router(health.router)


# ── batch detection ──


@app.post("/api/v1/detect")
async def detect(body: TextRequest) -> dict[str, Any]:
    """Every profane token of a finished text."""
    matches = _require_detector().detect(body.text)
    return {"has_profanity": bool(matches), "matches": matches}


@app.post("/api/v1/highlight")
async def highlight(body: TextRequest) -> dict[str, Any]:
    """Partition a text into clean and profane spans."""
    return {"spans": _require_detector().highlight(body.text)}


# ── live streams ──


@app.post("/api/v1/streams/{stream_id}/ingest")
async def ingest(stream_id: str, body: IngestRequest) -> dict[str, Any]:
    """Feed a chunk into the stream's window and alert on detections.

    Requests for the same stream are handled one at a time so alerts
    leave in the order their chunks arrived.  A stream idle for longer
    than ``stream_idle_timeout_s`` is discarded along with its lock.
    A ``config`` window size only applies to a stream created by this
    chunk; other streams use the service default.
    """
    registry = _require_registry()
    window_size = body.config.window_size if body.config else None
    for expired in registry.expire_idle():
        _stream_locks.pop(expired, None)
    lock = _stream_locks.setdefault(stream_id, asyncio.Lock())
    async with lock:
        detections = registry.ingest(stream_id, body.chunk, window_size)
        published = 0
        if detections and body.device_id and _publisher is not None:
            for detection in detections:
                sent = await _publisher.publish_detection(
                    detection,
                    body.device_id,
                    transcript_id=body.transcript_id,
                    speaker=body.speaker,
                    timestamp_ms=body.timestamp_ms,
                )
                published += int(sent)
    return {
        "stream_id": stream_id,
        "detections": detections,
        "alerts_published": published,
    }


@app.delete("/api/v1/streams/{stream_id}")
async def end_stream(stream_id: str) -> dict[str, Any]:
    """Discard a stream's window."""
    ended = _require_registry().end_stream(stream_id)
    _stream_locks.pop(stream_id, None)
    if not ended:
        raise HTTPException(status_code=404, detail=f"Unknown stream {stream_id}")
    return {"stream_id": stream_id, "ended": True}


# ── session analysis and review ──


@app.post("/api/v1/analyze")
async def analyze(body: AnalyzeRequest) -> dict[str, Any]:
    """Run every content check over a finished transcript."""
    result = analyze_content(
        body.segments,
        transcript_id=body.transcript_id,
        config=body.config,
        detector=_require_detector(),
    )
    return {
        "transcript_id": body.transcript_id,
        "proposed_flags": result.proposed_flags.model_dump(mode="json", by_alias=True),
        "participation": result.participation,
        "participation_flags": [
            f.model_dump(mode="json", by_alias=True) for f in result.participation_flags
        ],
        "topic_adherence_score": result.topic_adherence.score,
        "detected_keywords": result.topic_adherence.detected_keywords,
        "off_topic_indicators": result.topic_adherence.off_topic_indicators,
    }


@app.post("/api/v1/review")
async def review(body: ReviewRequest) -> dict[str, Any]:
    """Cross-check proposed flags with the external validator."""
    reviewed: ModerationFlags = await orchestrator.review(
        body.transcript_id,
        body.segment,
        body.proposed_flags,
        config=body.config,
        validator=_validator,
    )
    return {
        "transcript_id": body.transcript_id,
        "validated": reviewed is not body.proposed_flags,
        "flags": reviewed.model_dump(mode="json", by_alias=True),
    }


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "moderation.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )

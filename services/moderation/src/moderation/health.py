"""
Health check endpoint for the VoiceWarden moderation service.

Exposes a /health endpoint returning lexicon size, live stream count,
validator configuration, and publish-channel connectivity.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from vw_common.messaging.redis_client import RedisClient

from moderation.lexicon import Lexicon
from moderation.stream_registry import LiveStreamRegistry
from moderation.validator import FlagValidator

router = APIRouter()

# Module-level references set by main.py at startup
_lexicon: Lexicon | None = None
_registry: LiveStreamRegistry | None = None
_validator: FlagValidator | None = None
_redis: RedisClient | None = None


def configure(
    lexicon: Lexicon,
    registry: LiveStreamRegistry,
    validator: FlagValidator | None = None,
    redis: RedisClient | None = None,
) -> None:
    """Inject service references for the health endpoint."""
    global _lexicon, _registry, _validator, _redis
    _lexicon = lexicon
    _registry = registry
    _validator = validator
    _redis = redis


@router.get("/health")
async def health() -> JSONResponse:
    """Return moderation service health status.

    The validator and Redis are optional collaborators; only a missing
    lexicon makes the service unhealthy.
    """
    lexicon_ready = _lexicon is not None and len(_lexicon) > 0
    redis_ok = _redis is not None and await _redis.health_check()

    status_code = 200 if lexicon_ready else 503
    if not lexicon_ready:
        status = "unhealthy"
    elif redis_ok:
        status = "healthy"
    else:
        status = "degraded"

    return JSONResponse(
        status_code=status_code,
        content={
            "service": "moderation",
            "status": status,
            "lexicon_terms": len(_lexicon) if _lexicon is not None else 0,
            "active_streams": len(_registry.active_streams) if _registry else 0,
            "validator_configured": bool(_validator and _validator.is_configured),
            "alert_channel_connected": redis_ok,
        },
    )

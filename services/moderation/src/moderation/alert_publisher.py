"""
Alert publishing for VoiceWarden.

Converts live detections and flag records into AlertEvent messages and
broadcasts them on the per-device Redis pub/sub channel.  A failed
publish is logged and reported, never raised into the ingestion path.
"""

from __future__ import annotations

from typing import Iterable

import structlog

from vw_common.messaging.redis_client import RedisClient
from vw_common.models import AlertEvent, AlertType, FlagRecord, FlagType

from moderation.live_detector import LiveDetection

logger = structlog.get_logger()

CHANNEL_PREFIX = "alerts"


def alert_channel(device_id: str) -> str:
    """Pub/sub channel carrying the alerts of *device_id*."""
    return f"{CHANNEL_PREFIX}:{device_id}"


def detection_to_alert(
    detection: LiveDetection,
    device_id: str,
    transcript_id: str = "",
    speaker: str = "",
    timestamp_ms: int = 0,
) -> AlertEvent:
    """Build the profanity alert announcing a live *detection*."""
    return AlertEvent(
        type=AlertType.PROFANITY_ALERT,
        device_id=device_id,
        transcript_id=transcript_id,
        flagged_word=detection.phrase,
        timestamp_ms=timestamp_ms,
        speaker=speaker,
        context=detection.phrase,
        flag_type=FlagType.PROFANITY,
    )


class AlertPublisher:
    """Publishes alert events through a :class:`RedisClient`.

    Args:
        redis: Connected Redis client.
    """

    def __init__(self, redis: RedisClient) -> None:
        self._redis = redis

    async def publish(self, event: AlertEvent) -> bool:
        """Broadcast *event*; ``True`` if Redis accepted it."""
        log = logger.bind(device_id=event.device_id, alert_type=event.type.value)
        try:
            receivers = await self._redis.publish(
                alert_channel(event.device_id),
                event.model_dump(mode="json", by_alias=True),
            )
        except Exception as exc:  # noqa: BLE001
            log.error("alert_publish_failed", error=str(exc))
            return False
        log.info("alert_published", receivers=receivers, flagged_word=event.flagged_word)
        return True

    async def publish_detection(
        self,
        detection: LiveDetection,
        device_id: str,
        transcript_id: str = "",
        speaker: str = "",
        timestamp_ms: int = 0,
    ) -> bool:
        """Broadcast one live detection."""
        event = detection_to_alert(detection, device_id, transcript_id, speaker, timestamp_ms)
        return await self.publish(event)

    async def publish_flags(self, flags: Iterable[FlagRecord], device_id: str) -> int:
        """Broadcast one alert per flag.

        Returns:
            Number of alerts Redis accepted.
        """
        sent = 0
        for flag in flags:
            if await self.publish(AlertEvent.from_flag(flag, device_id)):
                sent += 1
        return sent

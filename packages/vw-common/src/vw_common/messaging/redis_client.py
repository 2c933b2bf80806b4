"""
Redis client wrapper for VoiceWarden.

Provides an async Redis client for the alert publish channel. Live
detections are broadcast with pub/sub so that any number of dashboard
subscribers receive them without the engine knowing who listens.
"""

from __future__ import annotations

import json
from typing import Any

import redis.asyncio as aioredis

from vw_common.config import get_settings


class RedisClient:
    """Async Redis wrapper with connect, publish, and health-check helpers.

    Args:
        url: Redis connection URL.  Falls back to ``Settings.redis_url``.
    """

    def __init__(self, url: str | None = None) -> None:
        self._url = url or get_settings().redis_url
        self._redis: aioredis.Redis | None = None

    # ── lifecycle ──

    async def connect(self) -> None:
        """Establish the Redis connection (idempotent)."""
        if self._redis is None:
            self._redis = aioredis.from_url(
                self._url,
                decode_responses=True,
            )

    async def close(self) -> None:
        """Close the Redis connection, if open."""
        if self._redis is not None:
            await self._redis.close()
            self._redis = None

    @property
    def redis(self) -> aioredis.Redis:
        """Return the underlying ``aioredis.Redis`` instance.

        Raises:
            RuntimeError: If ``connect()`` has not been called.
        """
        if self._redis is None:
            raise RuntimeError("RedisClient is not connected. Call connect() first.")
        return self._redis

    # ── pub/sub ──

    async def publish(self, channel: str, message: dict[str, Any] | str) -> int:
        """Publish a message to a Redis pub/sub *channel*.

        Args:
            channel: Channel name.
            message: Message payload (dict is JSON-serialised automatically).

        Returns:
            Number of subscribers that received the message.
        """
        payload = json.dumps(message) if isinstance(message, dict) else message
        result: int = await self.redis.publish(channel, payload)
        return result

    # ── health check ──

    async def health_check(self) -> bool:
        """Verify connectivity by issuing a ``PING``.

        Returns:
            ``True`` if Redis responds, ``False`` otherwise.
        """
        try:
            return bool(await self.redis.ping())
        except Exception:  # noqa: BLE001
            return False

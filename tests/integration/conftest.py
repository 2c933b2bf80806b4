"""
Integration test fixtures for VoiceWarden.

Uses ``testcontainers`` to start a disposable Redis for the alert
channel tests.  Tests depending on it are skipped when Docker is not
available.
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator, Iterator

import pytest
import redis.asyncio as aioredis
from testcontainers.redis import RedisContainer


@pytest.fixture(scope="session")
def redis_container() -> Iterator[RedisContainer]:
    """Start a disposable Redis container for the test session.

    Uses a direct TCP-based readiness check instead of the default
    ``docker exec`` approach for Docker Desktop compatibility.
    """
    import redis as _redis

    try:
        r = RedisContainer(image="redis:7-alpine")
        r.start()
    except Exception as exc:  # noqa: BLE001
        pytest.skip(f"Docker unavailable: {exc}")

    port = int(r.get_exposed_port(6379))
    deadline = time.monotonic() + 30
    while time.monotonic() < deadline:
        try:
            client = _redis.Redis(host="127.0.0.1", port=port, socket_connect_timeout=2)
            client.ping()
            client.close()
            break
        except _redis.RedisError:
            time.sleep(0.5)
    else:
        r.stop()
        raise TimeoutError("Redis container did not become ready in 30s")

    yield r
    r.stop()


@pytest.fixture(scope="session")
def redis_url(redis_container: RedisContainer) -> str:
    """Return the Redis connection URL for the test container."""
    host = redis_container.get_container_host_ip()
    port = redis_container.get_exposed_port(6379)
    return f"redis://{host}:{port}/0"


@pytest.fixture()
async def redis_subscriber(redis_url: str) -> AsyncIterator[aioredis.Redis]:
    """Raw Redis connection used to subscribe to alert channels."""
    r = aioredis.from_url(redis_url, decode_responses=True)
    yield r
    await r.aclose()

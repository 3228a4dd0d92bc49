from __future__ import annotations

import socket
from typing import Optional

from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.config import settings


_redis_client: Optional[Redis] = None

FALLBACK_REDIS_URL = "redis://localhost:6379/0"


def _create_redis_client() -> Redis:
    """
    Connects to REDIS_URL and falls back to localhost:6379 when the
    configured host does not resolve or refuses the connection. The same
    config then works inside docker-compose and when uvicorn runs on the host.
    """
    try:
        client = Redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=1,
        )
        client.ping()
        return client
    except (RedisConnectionError, socket.gaierror):
        pass

    client = Redis.from_url(
        FALLBACK_REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=1,
    )
    client.ping()
    return client


def get_redis() -> Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = _create_redis_client()
    return _redis_client


__all__ = ["get_redis"]

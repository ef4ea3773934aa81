"""Notification queue (ARQ on Redis) connection management."""

from __future__ import annotations

import asyncio

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings

from community_channels.core.config import get_settings

settings = get_settings()

_queue_pool: ArqRedis | None = None
_queue_lock = asyncio.Lock()


async def get_queue() -> ArqRedis:
    """Get or create the job queue connection."""
    global _queue_pool
    if _queue_pool is None:
        # create_pool awaits a connection; concurrent callers must share one pool
        async with _queue_lock:
            if _queue_pool is None:
                _queue_pool = await create_pool(
                    RedisSettings.from_dsn(settings.redis_url),
                    default_queue_name=settings.notification_queue_name,
                )
    return _queue_pool


async def close_queue() -> None:
    """Close the job queue connection pool."""
    global _queue_pool
    if _queue_pool is not None:
        await _queue_pool.close()
        _queue_pool = None

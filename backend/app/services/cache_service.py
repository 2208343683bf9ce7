"""
Redis caching service for room listings.

CACHING STRATEGY
================

What we cache:
  - Room listing responses (JSON-serialized)
  - Cache key pattern: "rooms:list:available={a}&min_capacity={c}&type={t}"

Why:
  - Browsing the catalog is the most frequent read
  - The catalog changes rarely (admin edits only)

Invalidation strategy:
  - On room creation or update: delete all room list keys (SCAN by prefix)
  - TTL-based expiry as safety net (5 minutes)

What we do NOT cache:
  - Anything derived from bookings. Availability for dates is always read
    from the database inside the booking transaction; a stale answer there
    would mean a double booking.

The same client backs the distributed room lock (room_lock_service).
Every Redis failure here is logged and swallowed: the cache is optional.
"""

import json
from typing import Optional

import redis.asyncio as redis

from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_cache_operation, redis_connection_errors

logger = get_logger(__name__)
settings = get_settings()

ROOM_LIST_PREFIX = "rooms:list:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled or down."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        try:
            await client.ping()
        except redis.RedisError as e:
            redis_connection_errors.inc()
            logger.error("redis_connection_failed", error=str(e))
            await client.aclose()
            return None
        _redis_client = client
        logger.info("redis_connected", url=settings.REDIS_URL)

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def make_room_list_key(available_only: bool, min_capacity: Optional[int], room_type: Optional[str]) -> str:
    return (
        f"{ROOM_LIST_PREFIX}available={available_only}"
        f"&min_capacity={min_capacity or ''}&type={room_type or ''}"
    )


async def get_cached_rooms(key: str) -> Optional[list]:
    """Retrieve cached room list response."""
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(key)
    except redis.RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))
        return None

    record_cache_operation("get", hit=data is not None)
    if data:
        logger.debug("cache_hit", key=key)
        return json.loads(data)
    logger.debug("cache_miss", key=key)
    return None


async def set_cached_rooms(key: str, data: list) -> None:
    """Cache room list response with TTL."""
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", hit=True)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except redis.RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_room_cache() -> None:
    """
    Invalidate all cached room listings.
    Uses SCAN to find and delete all keys matching the prefix.
    """
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{ROOM_LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except redis.RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled" if not settings.REDIS_ENABLED else "unavailable"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except redis.RedisError as e:
        return {"status": "error", "error": str(e)}

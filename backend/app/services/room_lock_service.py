"""
Distributed room lock for multi-worker deployments.
Implements RoomLock using redis.asyncio's Lock.

Degraded mode:
  When Redis is disabled or unreachable the lock falls back to a per-worker
  InProcessRoomLock instead of letting the booking run unguarded. Within a
  worker, bookings for a room stay serialised. Across workers, the room row
  read FOR UPDATE and the exclusion constraint serialise them on PostgreSQL.
  Other databases have no cross-worker guard while Redis is down, so run
  a single worker there or keep Redis healthy.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from redis.exceptions import LockError, RedisError

from app.core.exceptions import BookingConflictError
from app.core.logging import get_logger
from app.core.metrics import redis_connection_errors, room_lock_errors, room_lock_wait
from app.services.cache_service import get_redis
from app.services.interfaces.in_process_lock import InProcessRoomLock
from app.services.interfaces.room_lock import RoomLock

logger = get_logger(__name__)


def room_lock_key(room_id: int) -> str:
    return f"booking:room:{room_id}"


class RedisRoomLock(RoomLock):
    """
    Redis-based room lock.

    Use when:
    - Several API workers/containers accept bookings
    - Bookings must stay serialised across workers without relying on
      database row locks
    """

    def __init__(self, lease_timeout: float, wait_timeout: float):
        self.lease_timeout = lease_timeout
        self.wait_timeout = wait_timeout
        self.fallback = InProcessRoomLock(wait_timeout=wait_timeout)

    @asynccontextmanager
    async def _fall_back(self, room_id: int) -> AsyncIterator[None]:
        room_lock_errors.labels(reason="redis_unavailable").inc()
        logger.warning("room_lock_fallback", room_id=room_id, strategy="in_process")
        async with self.fallback.hold(room_id):
            yield

    @asynccontextmanager
    async def hold(self, room_id: int) -> AsyncIterator[None]:
        client = await get_redis()
        if client is None:
            async with self._fall_back(room_id):
                yield
            return

        lock = client.lock(
            room_lock_key(room_id),
            timeout=self.lease_timeout,
            blocking_timeout=self.wait_timeout,
        )
        started = time.perf_counter()
        try:
            acquired = await lock.acquire()
        except RedisError as e:
            redis_connection_errors.inc()
            logger.error("room_lock_redis_error", room_id=room_id, error=str(e))
            async with self._fall_back(room_id):
                yield
            return

        if not acquired:
            room_lock_errors.labels(reason="timeout").inc()
            logger.warning("room_lock_timeout", room_id=room_id, wait=self.wait_timeout)
            raise BookingConflictError(
                "Room is being booked by another guest. Please try again."
            )
        room_lock_wait.observe(time.perf_counter() - started)

        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                # Lease expired before we finished; someone else may hold it now
                logger.warning("room_lock_lease_expired", room_id=room_id, lease=self.lease_timeout)
            except RedisError as e:
                redis_connection_errors.inc()
                logger.error("room_lock_release_failed", room_id=room_id, error=str(e))

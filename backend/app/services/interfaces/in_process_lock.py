"""
In-process room lock - one asyncio.Lock per room id.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from app.core.exceptions import BookingConflictError
from app.core.logging import get_logger
from app.core.metrics import room_lock_errors, room_lock_wait
from app.services.interfaces.room_lock import RoomLock

logger = get_logger(__name__)


class InProcessRoomLock(RoomLock):
    """
    Serialise bookings per room inside one event loop.

    Use when:
    - A single API worker serves all traffic
    - Tests and local development
    - As the per-worker fallback of the Redis lock

    Locks are created on first use and dropped once nobody holds or waits for
    them, so the registry only ever contains rooms with bookings in flight.
    """

    def __init__(self, wait_timeout: Optional[float] = None):
        self.wait_timeout = wait_timeout
        self._locks: dict[int, asyncio.Lock] = {}
        self._users: dict[int, int] = {}

    async def _acquire(self, lock: asyncio.Lock) -> bool:
        """
        Acquire within wait_timeout. The acquire runs as its own task so that
        when we give up we can see whether it won the lock anyway and hand
        the lock back.
        """
        waiter = asyncio.ensure_future(lock.acquire())
        try:
            await asyncio.wait({waiter}, timeout=self.wait_timeout)
        except asyncio.CancelledError:
            await self._abandon(lock, waiter)
            raise
        if waiter.done():
            return True
        await self._abandon(lock, waiter)
        return False

    @staticmethod
    async def _abandon(lock: asyncio.Lock, waiter: asyncio.Future) -> None:
        waiter.cancel()
        await asyncio.wait({waiter})
        if not waiter.cancelled():
            # acquired between the timeout and the cancel
            lock.release()

    @asynccontextmanager
    async def hold(self, room_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(room_id, asyncio.Lock())
        self._users[room_id] = self._users.get(room_id, 0) + 1
        try:
            started = time.perf_counter()
            if not await self._acquire(lock):
                room_lock_errors.labels(reason="timeout").inc()
                logger.warning("room_lock_timeout", room_id=room_id, wait=self.wait_timeout)
                raise BookingConflictError(
                    "Room is being booked by another guest. Please try again."
                )
            room_lock_wait.observe(time.perf_counter() - started)
            try:
                yield
            finally:
                lock.release()
        finally:
            self._users[room_id] -= 1
            if self._users[room_id] == 0:
                del self._users[room_id]
                self._locks.pop(room_id, None)

    def active_rooms(self) -> list[int]:
        return sorted(self._locks)

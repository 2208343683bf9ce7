"""
Room lock strategy interface.
Allows swapping how the booking critical section is serialised per room.
"""

from abc import ABC, abstractmethod
from typing import AsyncContextManager


class RoomLock(ABC):
    """
    Mutual exclusion for the conflict-check-then-insert sequence of a room.

    Implementations:
    - InProcessRoomLock: asyncio.Lock per room, single worker process
    - RedisRoomLock: distributed lock in Redis, many workers

    Whichever strategy is active, the room row is also read FOR UPDATE inside
    the booking transaction, so PostgreSQL serialises creators across workers
    even while the Redis lock runs on its per-worker fallback.
    """

    @abstractmethod
    def hold(self, room_id: int) -> AsyncContextManager[None]:
        """
        Hold the lock for `room_id` for the duration of the `async with` block.

        Raises:
            BookingConflictError: the lock could not be acquired in time
        """

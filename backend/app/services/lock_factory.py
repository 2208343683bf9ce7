"""
Room lock strategy factory.
Configures which serialisation strategy guards booking creation.
"""

from typing import Optional

from app.core.config import get_settings
from app.services.interfaces.room_lock import RoomLock
from app.services.interfaces.in_process_lock import InProcessRoomLock
from app.services.room_lock_service import RedisRoomLock


def build_room_lock() -> RoomLock:
    """
    Build the configured room lock.

    - in_process (default): one worker, or tests
    - redis: several workers sharing one Redis

    Selected with the BOOKING_LOCK_STRATEGY env var.
    """
    settings = get_settings()

    if settings.BOOKING_LOCK_STRATEGY == "redis":
        return RedisRoomLock(
            lease_timeout=settings.BOOKING_LOCK_TIMEOUT,
            wait_timeout=settings.BOOKING_LOCK_WAIT,
        )
    return InProcessRoomLock(wait_timeout=settings.BOOKING_LOCK_WAIT)


# Singleton instance
_room_lock: Optional[RoomLock] = None


def get_room_lock() -> RoomLock:
    """Get room lock singleton."""
    global _room_lock
    if _room_lock is None:
        _room_lock = build_room_lock()
    return _room_lock


def reset_room_lock() -> None:
    global _room_lock
    _room_lock = None

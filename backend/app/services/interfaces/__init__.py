"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .room_lock import RoomLock
from .in_process_lock import InProcessRoomLock

__all__ = ['RoomLock', 'InProcessRoomLock']

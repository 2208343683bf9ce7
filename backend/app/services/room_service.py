"""
Room catalog service: CRUD for rooms plus the lookups the booking core needs.
"""

from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import InvalidRangeError, RoomNotFoundError
from app.core.logging import get_logger
from app.models.room import Room
from app.repositories.booking_repository import BookingRepository
from app.schemas.room import RoomCreate, RoomUpdate
from app.services.pricing import PriceQuote, quote_price

logger = get_logger(__name__)


async def create_room(db: AsyncSession, room_data: RoomCreate) -> Room:
    room = Room(**room_data.model_dump())
    db.add(room)
    await db.flush()
    await db.refresh(room)

    logger.info("room_created", room_id=room.id, name=room.name, capacity=room.capacity)
    return room


async def get_room(db: AsyncSession, room_id: int) -> Room:
    result = await db.execute(select(Room).where(Room.id == room_id))
    room = result.scalar_one_or_none()

    if not room:
        raise RoomNotFoundError(f"Room {room_id} not found")
    return room


async def lock_room(db: AsyncSession, room_id: int) -> Optional[Room]:
    """
    Load a room with SELECT ... FOR UPDATE so that concurrent bookings of the
    same room queue on the row until the current transaction ends.
    SQLite ignores FOR UPDATE; there the room lock strategy does the work.
    """
    result = await db.execute(
        select(Room)
        .where(Room.id == room_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_rooms(
    db: AsyncSession,
    available_only: bool = False,
    min_capacity: Optional[int] = None,
    room_type: Optional[str] = None,
) -> list[Room]:
    query = select(Room)

    if available_only:
        query = query.where(Room.is_available.is_(True))
    if min_capacity is not None:
        query = query.where(Room.capacity >= min_capacity)
    if room_type:
        query = query.where(Room.room_type == room_type)

    result = await db.execute(query.order_by(Room.created_at.desc(), Room.id.desc()))
    return list(result.scalars().all())


async def update_room(db: AsyncSession, room_id: int, room_data: RoomUpdate) -> Room:
    """
    Partial update. Changing price or capacity never touches existing
    bookings: their totals were fixed when they were created.
    """
    room = await get_room(db, room_id)
    changes = room_data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(room, field, value)

    await db.flush()
    await db.refresh(room)

    logger.info("room_updated", room_id=room.id, fields=sorted(changes))
    return room


async def check_availability(
    db: AsyncSession,
    room_id: int,
    check_in: date,
    check_out: date,
) -> list[tuple[date, date]]:
    """
    Date ranges of active bookings that clash with [check_in, check_out).
    Advisory only: the answer can change before a booking is placed.
    """
    if check_in >= check_out:
        raise InvalidRangeError()
    await get_room(db, room_id)

    conflicts = await BookingRepository(db).find_conflicts(room_id, check_in, check_out)
    return [(b.check_in, b.check_out) for b in conflicts]


async def get_price_quote(
    db: AsyncSession,
    room_id: int,
    check_in: date,
    check_out: date,
) -> PriceQuote:
    room = await get_room(db, room_id)
    settings = get_settings()
    return quote_price(
        check_in,
        check_out,
        room.price,
        service_fee_rate=settings.SERVICE_FEE_RATE,
        tax_rate=settings.TAX_RATE,
    )

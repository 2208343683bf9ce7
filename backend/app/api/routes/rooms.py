"""
Room catalog endpoints with Redis caching on list operations.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.security import require_admin
from app.db.session import get_db
from app.models.user import User
from app.schemas.booking import BookingResponse
from app.schemas.room import (
    AvailabilityResponse,
    DateRangeResponse,
    PriceQuoteResponse,
    RoomCreate,
    RoomResponse,
    RoomUpdate,
)
from app.services import booking_service, room_service
from app.services.cache_service import (
    get_cached_rooms,
    invalidate_room_cache,
    make_room_list_key,
    set_cached_rooms,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.get("/", response_model=list[RoomResponse])
async def list_rooms_endpoint(
    available_only: bool = Query(False),
    min_capacity: Optional[int] = Query(None, ge=1),
    room_type: Optional[str] = Query(None, max_length=50),
    db: AsyncSession = Depends(get_db),
):
    """
    List rooms, newest first.
    Results are cached in Redis for 5 minutes and invalidated on room changes.
    """
    key = make_room_list_key(available_only, min_capacity, room_type)
    cached = await get_cached_rooms(key)
    if cached is not None:
        logger.info("rooms_list_cache_hit", key=key)
        return cached

    rooms = await room_service.list_rooms(db, available_only, min_capacity, room_type)
    response_data = [RoomResponse.model_validate(r).model_dump(mode="json") for r in rooms]
    await set_cached_rooms(key, response_data)
    return response_data


@router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room_endpoint(
    room_data: RoomCreate,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    room = await room_service.create_room(db, room_data)
    await invalidate_room_cache()
    return room


@router.get("/{room_id}", response_model=RoomResponse)
async def get_room_endpoint(room_id: int, db: AsyncSession = Depends(get_db)):
    return await room_service.get_room(db, room_id)


@router.patch("/{room_id}", response_model=RoomResponse)
async def update_room_endpoint(
    room_id: int,
    room_data: RoomUpdate,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Partial update; set `is_available=false` to withdraw a room."""
    room = await room_service.update_room(db, room_id, room_data)
    await invalidate_room_cache()
    return room


@router.get("/{room_id}/availability", response_model=AvailabilityResponse)
async def room_availability_endpoint(
    room_id: int,
    check_in: date,
    check_out: date,
    db: AsyncSession = Depends(get_db),
):
    """Which of the requested nights are already taken. Never cached."""
    conflicts = await room_service.check_availability(db, room_id, check_in, check_out)
    return AvailabilityResponse(
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        available=not conflicts,
        conflicts=[DateRangeResponse(check_in=start, check_out=end) for start, end in conflicts],
    )


@router.get("/{room_id}/quote", response_model=PriceQuoteResponse)
async def room_quote_endpoint(
    room_id: int,
    check_in: date,
    check_out: date,
    db: AsyncSession = Depends(get_db),
):
    """Checkout price breakdown including service fee and taxes."""
    quote = await room_service.get_price_quote(db, room_id, check_in, check_out)
    return PriceQuoteResponse(
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        nights=quote.nights,
        nightly_rate=quote.nightly_rate,
        room_total=quote.room_total,
        fees=quote.fees,
        taxes=quote.taxes,
        total=quote.total,
    )


@router.get("/{room_id}/bookings", response_model=list[BookingResponse])
async def room_bookings_endpoint(
    room_id: int,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.get_room_bookings(db, room_id)

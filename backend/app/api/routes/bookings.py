"""
Booking endpoints with concurrency-safe reservation.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import get_current_user, get_current_user_id, require_admin
from app.db.session import get_db
from app.models.user import User
from app.schemas.booking import BookingCreate, BookingResponse, BookingStatusUpdate
from app.services import booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a room for a date range.

    Overlapping requests for the same room are serialised; exactly one wins
    and the others receive 409 with code `booking_conflict`.
    """
    return await booking_service.create_booking(
        db,
        guest_id=user.id,
        room_id=booking_data.room_id,
        check_in=booking_data.check_in,
        check_out=booking_data.check_out,
        guests=booking_data.guests,
        special_requests=booking_data.special_requests,
    )


@router.get("/my-bookings", response_model=list[BookingResponse])
async def list_my_bookings(
    guest_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get all bookings for the authenticated guest, newest first."""
    return await booking_service.get_guest_bookings(db, guest_id)


@router.get("/", response_model=list[BookingResponse])
async def list_all_bookings(
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.get_all_bookings(db)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await booking_service.get_booking(db, booking_id, user.id, user.role)


@router.patch("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking. The dates become bookable again immediately."""
    return await booking_service.cancel_booking(db, booking_id, user.id, user.role)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    status_data: BookingStatusUpdate,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Admin: confirm, cancel or complete a booking."""
    return await booking_service.set_status(db, booking_id, status_data.status)

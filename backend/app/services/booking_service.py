"""
Booking service with concurrency-safe room reservation.

CONCURRENCY STRATEGY: Per-room Critical Section
===============================================

Problem:
  Two guests ask for overlapping dates in the same room at the same time.
  Both run "SELECT overlapping bookings", both see none, both INSERT.
  Result: a double-booked room.

Solution:
  The conflict check and the insert run as one critical section per room:

  1. Acquire the room lock (RoomLock strategy, see lock_factory)
  2. SELECT the room row FOR UPDATE (serialises across processes on PostgreSQL)
  3. SELECT active bookings overlapping [check_in, check_out)
  4. INSERT the new booking and COMMIT
  5. Release the room lock

  The commit happens before the lock is released, so the next caller's
  conflict check always sees the winner's row. The loser gets
  BookingConflictError; nothing is retried on its behalf.

  The PostgreSQL exclusion constraint on (room_id, daterange) is the final
  safety net if both application-level layers are bypassed.

Status changes do not take the room lock: they never add a claim on dates,
they are single-row compare-and-set UPDATEs (see BookingRepository).
"""

import time
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import (
    BookingConflictError,
    BookingError,
    CapacityExceededError,
    ForbiddenError,
    InvalidGuestCountError,
    InvalidRangeError,
    InvalidTransitionError,
    NotFoundError,
    RoomNotFoundError,
    RoomUnavailableError,
)
from app.core.logging import get_logger
from app.core.metrics import booking_latency, record_booking_attempt, record_transition
from app.models.booking import Booking, BookingStatus
from app.models.user import ROLE_ADMIN
from app.repositories.booking_repository import BookingRepository
from app.services.booking_lifecycle import validate_transition
from app.services.lock_factory import get_room_lock
from app.services.pricing import compute_price
from app.services.room_service import get_room, lock_room

logger = get_logger(__name__)


async def create_booking(
    db: AsyncSession,
    guest_id: int,
    room_id: int,
    check_in: date,
    check_out: date,
    guests: int = 1,
    special_requests: Optional[str] = None,
) -> Booking:
    """
    Reserve a room for [check_in, check_out).
    The booking starts in the configured initial status (pending by default).
    """
    started = time.perf_counter()
    try:
        if check_in >= check_out:
            raise InvalidRangeError(
                f"Check-out ({check_out}) must be after check-in ({check_in})"
            )
        if guests < 1:
            raise InvalidGuestCountError(f"At least one guest is required, got {guests}")

        async with get_room_lock().hold(room_id):
            booking = await _reserve(
                db, guest_id, room_id, check_in, check_out, guests, special_requests
            )
    except BookingConflictError:
        record_booking_attempt("conflict")
        raise
    except BookingError as e:
        record_booking_attempt("rejected")
        logger.info("booking_rejected", room_id=room_id, guest_id=guest_id, reason=e.code)
        raise
    except SQLAlchemyError as e:
        record_booking_attempt("error")
        logger.error("booking_storage_error", room_id=room_id, guest_id=guest_id, error=str(e))
        raise

    booking_latency.observe(time.perf_counter() - started)
    record_booking_attempt("success")
    logger.info(
        "booking_created",
        booking_id=booking.id,
        guest_id=guest_id,
        room_id=room_id,
        check_in=str(check_in),
        check_out=str(check_out),
        total_price=str(booking.total_price),
        status=booking.status,
    )
    return booking


async def _reserve(
    db: AsyncSession,
    guest_id: int,
    room_id: int,
    check_in: date,
    check_out: date,
    guests: int,
    special_requests: Optional[str],
) -> Booking:
    """Body of the critical section. Caller holds the room lock."""
    room = await lock_room(db, room_id)
    if room is None:
        raise RoomNotFoundError(f"Room {room_id} not found")
    if not room.is_available:
        raise RoomUnavailableError(f"Room {room_id} is not available for booking")
    if guests > room.capacity:
        raise CapacityExceededError(
            f"Room {room_id} sleeps {room.capacity}, requested {guests} guests"
        )

    repo = BookingRepository(db)
    conflicts = await repo.find_conflicts(room_id, check_in, check_out)
    if conflicts:
        logger.info(
            "booking_conflict",
            room_id=room_id,
            check_in=str(check_in),
            check_out=str(check_out),
            conflicting_ids=[b.id for b in conflicts],
        )
        raise BookingConflictError()

    price = compute_price(check_in, check_out, room.price)
    booking = await repo.insert(
        Booking(
            room_id=room_id,
            guest_id=guest_id,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            total_price=price.total,
            status=get_settings().BOOKING_INITIAL_STATUS,
            special_requests=special_requests,
        )
    )
    await db.commit()
    return booking


async def _load(repo: BookingRepository, booking_id: int) -> Booking:
    booking = await repo.get(booking_id)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found")
    return booking


async def _transition(repo: BookingRepository, booking: Booking, target: str) -> Booking:
    current = booking.status
    validate_transition(current, target)
    updated = await repo.update_status(booking.id, target, expected_status=current)

    record_transition(current, target)
    logger.info(
        "booking_status_changed",
        booking_id=booking.id,
        room_id=booking.room_id,
        from_status=current,
        to_status=target,
    )
    return updated


async def cancel_booking(
    db: AsyncSession,
    booking_id: int,
    requester_id: int,
    requester_role: str,
) -> Booking:
    """Guests may cancel their own bookings; admins may cancel any."""
    repo = BookingRepository(db)
    booking = await _load(repo, booking_id)

    if requester_role != ROLE_ADMIN and booking.guest_id != requester_id:
        logger.warning(
            "booking_cancel_forbidden",
            booking_id=booking_id,
            requester_id=requester_id,
        )
        raise ForbiddenError()

    return await _transition(repo, booking, BookingStatus.CANCELLED.value)


async def set_status(db: AsyncSession, booking_id: int, new_status: str) -> Booking:
    """Admin path: any legal transition."""
    try:
        target = BookingStatus(new_status).value
    except ValueError:
        raise InvalidTransitionError(f"Unknown booking status {new_status!r}")

    repo = BookingRepository(db)
    booking = await _load(repo, booking_id)
    return await _transition(repo, booking, target)


async def get_booking(
    db: AsyncSession,
    booking_id: int,
    requester_id: int,
    requester_role: str,
) -> Booking:
    booking = await _load(BookingRepository(db), booking_id)
    if requester_role != ROLE_ADMIN and booking.guest_id != requester_id:
        raise ForbiddenError("You are not allowed to view this booking")
    return booking


async def get_guest_bookings(db: AsyncSession, guest_id: int) -> list[Booking]:
    """Get all bookings for a guest, newest first."""
    return await BookingRepository(db).find_by_guest(guest_id)


async def get_room_bookings(db: AsyncSession, room_id: int) -> list[Booking]:
    await get_room(db, room_id)
    return await BookingRepository(db).find_by_room(room_id)


async def get_all_bookings(db: AsyncSession) -> list[Booking]:
    return await BookingRepository(db).find_all()


async def get_booking_stats(db: AsyncSession, days: Optional[int] = None) -> dict:
    since: Optional[datetime] = None
    if days is not None:
        since = datetime.now(timezone.utc) - timedelta(days=days)
    summary = await BookingRepository(db).status_summary(since=since)
    summary["since"] = since
    return summary

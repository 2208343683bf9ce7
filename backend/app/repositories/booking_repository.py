"""
Booking repository: the only code that reads or writes the bookings table.

All queries are SQLAlchemy expressions with bound parameters. The repository
never commits; transaction boundaries belong to the caller (the booking
service commits inside the room lock, request handlers commit via get_db).
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BookingConflictError, InvalidTransitionError, NotFoundError
from app.core.logging import get_logger
from app.db.base import utcnow
from app.models.booking import ACTIVE_STATUSES, Booking, BookingStatus

logger = get_logger(__name__)

# Name of the PostgreSQL exclusion constraint created by the initial migration
EXCLUSION_CONSTRAINT = "ex_bookings_room_active_dates"


class BookingRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, booking_id: int) -> Optional[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_conflicts(self, room_id: int, check_in: date, check_out: date) -> list[Booking]:
        """
        Active bookings of the room whose [check_in, check_out) overlaps the
        given range. Same predicate as availability.overlaps, pushed into SQL.
        """
        result = await self.db.execute(
            select(Booking)
            .where(
                Booking.room_id == room_id,
                Booking.status.in_(ACTIVE_STATUSES),
                Booking.check_in < check_out,
                Booking.check_out > check_in,
            )
            .order_by(Booking.check_in.asc())
        )
        return list(result.scalars().all())

    async def insert(self, booking: Booking) -> Booking:
        self.db.add(booking)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            if EXCLUSION_CONSTRAINT in str(e.orig):
                logger.warning(
                    "booking_exclusion_violation",
                    room_id=booking.room_id,
                    check_in=str(booking.check_in),
                    check_out=str(booking.check_out),
                )
                raise BookingConflictError() from e
            raise
        await self.db.refresh(booking)
        return booking

    async def update_status(
        self,
        booking_id: int,
        new_status: str,
        expected_status: Optional[str] = None,
    ) -> Booking:
        """
        Single-row status change. With expected_status the UPDATE only applies
        if the row still holds that status, so two concurrent transitions from
        the same state cannot both win.
        """
        conditions = [Booking.id == booking_id]
        if expected_status is not None:
            conditions.append(Booking.status == expected_status)

        result = await self.db.execute(
            update(Booking)
            .where(*conditions)
            .values(status=new_status, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            current = await self.get(booking_id)
            if current is None:
                raise NotFoundError(f"Booking {booking_id} not found")
            raise InvalidTransitionError(
                f"Booking {booking_id} changed status concurrently (now {current.status})"
            )

        return await self.get(booking_id)

    async def find_by_room(self, room_id: int) -> list[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.room_id == room_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return list(result.scalars().all())

    async def find_by_guest(self, guest_id: int) -> list[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.guest_id == guest_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return list(result.scalars().all())

    async def find_all(self) -> list[Booking]:
        result = await self.db.execute(
            select(Booking).order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return list(result.scalars().all())

    async def status_summary(self, since: Optional[datetime] = None) -> dict:
        """Counts per status plus revenue from confirmed bookings."""
        confirmed = Booking.status == BookingStatus.CONFIRMED.value
        query = select(
            func.count(Booking.id),
            *[
                func.count(case((Booking.status == s.value, 1)))
                for s in BookingStatus
            ],
            func.coalesce(func.sum(case((confirmed, Booking.total_price), else_=0)), 0),
            func.avg(case((confirmed, Booking.total_price))),
        )
        if since is not None:
            query = query.where(Booking.created_at >= since)

        row = (await self.db.execute(query)).one()
        total, *per_status, revenue, average = row
        summary = {"total": total}
        for s, count in zip(BookingStatus, per_status):
            summary[s.value] = count
        summary["confirmed_revenue"] = Decimal(str(revenue)).quantize(Decimal("0.01"))
        summary["average_confirmed_value"] = (
            Decimal(str(average)).quantize(Decimal("0.01")) if average is not None else None
        )
        return summary

"""
Booking model: one guest's claim on a room for a date range.

Key design decisions:
- Dates are half-open: a guest occupies [check_in, check_out), so a check-out
  and another guest's check-in on the same day do not collide
- Status field allows cancellation without deleting records
- Composite index (room_id, check_in, check_out) serves the conflict lookup
- On PostgreSQL the migration adds an exclusion constraint over
  (room_id, daterange) for active bookings as the last line of defence
"""

import enum

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Index, Integer, Numeric, String

from app.db.base import Base, TimestampMixin


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Bookings in these states hold the room for their dates
ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    guests = Column(Integer, nullable=False, default=1)
    total_price = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    special_requests = Column(String(1000), nullable=True)

    __table_args__ = (
        CheckConstraint("check_out > check_in", name="check_booking_dates_ordered"),
        CheckConstraint("guests > 0", name="check_booking_guests_positive"),
        CheckConstraint("total_price >= 0", name="check_booking_total_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="check_booking_status",
        ),
        Index("ix_bookings_room_dates", "room_id", "check_in", "check_out"),
    )

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, room={self.room_id}, guest={self.guest_id}, "
            f"{self.check_in}..{self.check_out}, status={self.status})>"
        )

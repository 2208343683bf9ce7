"""
Room model: the catalog entry a booking is made against.

Key design decisions:
- `price` is the nightly rate; bookings copy the computed total at creation
  so later price changes never touch existing bookings
- `is_available` is a global switch (maintenance, withdrawn rooms); date
  availability is derived from bookings, never stored here
- Rooms are never deleted once booked; withdraw them with `is_available`
"""

from sqlalchemy import JSON, Boolean, CheckConstraint, Column, Integer, Numeric, String

from app.db.base import Base, TimestampMixin


class Room(Base, TimestampMixin):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(2000), nullable=True)
    room_type = Column(String(50), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    capacity = Column(Integer, nullable=False)
    amenities = Column(JSON, nullable=False, default=list)
    is_available = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_room_price_non_negative"),
        CheckConstraint("capacity > 0", name="check_room_capacity_positive"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, name={self.name}, capacity={self.capacity}, price={self.price})>"

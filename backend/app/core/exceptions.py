"""
Booking error taxonomy.

Every rejection the booking core can produce is a BookingError subclass that
carries its HTTP status and a stable machine-readable code. Services raise
them; the handler registered in app.main turns them into
{"detail": ..., "code": ...} responses. Anything that is not a BookingError
(database outages, bugs) is a server error.
"""

from typing import Optional


class BookingError(Exception):
    status_code: int = 400
    code: str = "booking_error"
    default_detail: str = "Booking request rejected"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidRangeError(BookingError):
    status_code = 422
    code = "invalid_range"
    default_detail = "Check-out date must be after check-in date"


class InvalidGuestCountError(BookingError):
    status_code = 422
    code = "invalid_guest_count"
    default_detail = "At least one guest is required"


class RoomNotFoundError(BookingError):
    status_code = 404
    code = "room_not_found"
    default_detail = "Room not found"


class RoomUnavailableError(BookingError):
    status_code = 409
    code = "room_unavailable"
    default_detail = "Room is not available"


class CapacityExceededError(BookingError):
    status_code = 422
    code = "capacity_exceeded"
    default_detail = "Too many guests for this room"


class BookingConflictError(BookingError):
    status_code = 409
    code = "booking_conflict"
    default_detail = "Room is already booked for these dates"


class InvalidTransitionError(BookingError):
    status_code = 409
    code = "invalid_transition"
    default_detail = "Booking status change not allowed"


class ForbiddenError(BookingError):
    status_code = 403
    code = "forbidden"
    default_detail = "You are not allowed to modify this booking"


class NotFoundError(BookingError):
    status_code = 404
    code = "not_found"
    default_detail = "Booking not found"

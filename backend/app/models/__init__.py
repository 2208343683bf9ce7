from app.models.user import User
from app.models.room import Room
from app.models.booking import Booking, BookingStatus

__all__ = ["User", "Room", "Booking", "BookingStatus"]

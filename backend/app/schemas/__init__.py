from app.schemas.user import UserCreate, UserResponse, UserLogin, Token
from app.schemas.room import (
    RoomCreate, RoomUpdate, RoomResponse, AvailabilityResponse, PriceQuoteResponse,
)
from app.schemas.booking import (
    BookingCreate, BookingStatusUpdate, BookingResponse, BookingStatsResponse,
)

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token",
    "RoomCreate", "RoomUpdate", "RoomResponse", "AvailabilityResponse", "PriceQuoteResponse",
    "BookingCreate", "BookingStatusUpdate", "BookingResponse", "BookingStatsResponse",
]

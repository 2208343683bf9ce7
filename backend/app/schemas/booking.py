"""
Pydantic schemas for booking-related request/response validation.

Date ordering and guest count are deliberately not constrained here: the
booking service owns those rules and reports them with their own error codes.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field


class BookingCreate(BaseModel):
    room_id: int
    check_in: date
    check_out: date
    guests: int = 1
    special_requests: Optional[str] = Field(None, max_length=1000)


class BookingStatusUpdate(BaseModel):
    status: Literal["pending", "confirmed", "cancelled", "completed"]


class BookingResponse(BaseModel):
    id: int
    room_id: int
    guest_id: int
    check_in: date
    check_out: date
    guests: int
    total_price: Decimal
    status: str
    special_requests: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingStatsResponse(BaseModel):
    total: int
    pending: int
    confirmed: int
    cancelled: int
    completed: int
    confirmed_revenue: Decimal
    average_confirmed_value: Optional[Decimal]
    since: Optional[datetime] = None

"""
Pydantic schemas for room-related request/response validation.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class RoomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    room_type: str = Field(..., min_length=1, max_length=50)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    capacity: int = Field(..., ge=1, le=50)
    amenities: list[str] = Field(default_factory=list)
    is_available: bool = True


class RoomUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    room_type: Optional[str] = Field(None, min_length=1, max_length=50)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    capacity: Optional[int] = Field(None, ge=1, le=50)
    amenities: Optional[list[str]] = None
    is_available: Optional[bool] = None


class RoomResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    room_type: str
    price: Decimal
    capacity: int
    amenities: list[str]
    is_available: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class DateRangeResponse(BaseModel):
    check_in: date
    check_out: date


class AvailabilityResponse(BaseModel):
    room_id: int
    check_in: date
    check_out: date
    available: bool
    conflicts: list[DateRangeResponse]


class PriceQuoteResponse(BaseModel):
    room_id: int
    check_in: date
    check_out: date
    nights: int
    nightly_rate: Decimal
    room_total: Decimal
    fees: Decimal
    taxes: Decimal
    total: Decimal

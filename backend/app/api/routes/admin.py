"""
Admin-only reporting endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import require_admin
from app.db.session import get_db
from app.schemas.booking import BookingStatsResponse
from app.services import booking_service

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/bookings/stats", response_model=BookingStatsResponse)
async def booking_stats(
    days: Optional[int] = Query(None, ge=1, le=3650),
    db: AsyncSession = Depends(get_db),
):
    """Booking counts per status and confirmed revenue, optionally for the last `days` days."""
    return await booking_service.get_booking_stats(db, days)

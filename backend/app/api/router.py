"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter

from app.api.routes import admin, auth, bookings, rooms

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(rooms.router)
api_router.include_router(bookings.router)
api_router.include_router(admin.router)

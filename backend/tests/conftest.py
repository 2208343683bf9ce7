"""
Pytest fixtures for test database, client, and authentication.

Each test gets its own SQLite file database (aiosqlite) so that several
sessions can run side by side, as they do in production. Redis is disabled.
"""

import os

os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./unused.db")

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.security import create_access_token
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.booking import Booking
from app.models.room import Room
from app.models.user import ROLE_ADMIN, ROLE_USER, User
from app.services.lock_factory import reset_room_lock

# Fixture users cannot log in with a password; tests mint tokens directly.
UNUSABLE_PASSWORD_HASH = "!"


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(engine) -> async_sessionmaker:
    reset_room_lock()
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get a fresh session, like get_db does."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_user(db: AsyncSession, email: str, role: str) -> User:
    user = User(
        email=email,
        first_name="Test",
        last_name=role.title(),
        hashed_password=UNUSABLE_PASSWORD_HASH,
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "guest@example.com", ROLE_USER)


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "other@example.com", ROLE_USER)


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _make_user(db_session, "admin@example.com", ROLE_ADMIN)


def _headers(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    return _headers(test_user)


@pytest_asyncio.fixture
async def other_headers(other_user: User) -> dict:
    return _headers(other_user)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict:
    return _headers(admin_user)


@pytest_asyncio.fixture
async def test_room(db_session: AsyncSession) -> Room:
    """Double room, $100 a night."""
    room = Room(
        name="Harbour View Double",
        description="Two guests, sea view",
        room_type="double",
        price=Decimal("100.00"),
        capacity=2,
        amenities=["wifi", "balcony"],
        is_available=True,
    )
    db_session.add(room)
    await db_session.commit()
    await db_session.refresh(room)
    return room


@pytest_asyncio.fixture
async def closed_room(db_session: AsyncSession) -> Room:
    room = Room(
        name="Garden Suite",
        room_type="suite",
        price=Decimal("250.00"),
        capacity=4,
        amenities=[],
        is_available=False,
    )
    db_session.add(room)
    await db_session.commit()
    await db_session.refresh(room)
    return room


@pytest_asyncio.fixture
async def confirmed_booking(db_session: AsyncSession, test_room: Room, other_user: User) -> Booking:
    """Someone else holds the room for [June 10, June 15)."""
    booking = Booking(
        room_id=test_room.id,
        guest_id=other_user.id,
        check_in=date(2025, 6, 10),
        check_out=date(2025, 6, 15),
        guests=2,
        total_price=Decimal("500.00"),
        status="confirmed",
    )
    db_session.add(booking)
    await db_session.commit()
    await db_session.refresh(booking)
    return booking

"""
Shared test fixtures.

Each test gets its own file-backed SQLite database (via aiosqlite) so the
suite runs without PostgreSQL.  A file rather than ``:memory:`` means every
session opens its own connection, which is what the concurrent-accept
tests need to exercise real row locking.
"""

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from ridetrack.domain.enums import RideStatus
from ridetrack.infrastructure.database import Base
from ridetrack.infrastructure.models import RideModel


@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Create tables in a fresh database, yield a session factory, dispose."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'rides.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def make_ride(session_factory):
    """Insert a committed ride and return its id."""

    async def _make(
        status: RideStatus = RideStatus.REQUESTED,
        *,
        ride_id: str | None = None,
        driver_name: str | None = None,
        **fields,
    ) -> str:
        if driver_name is None and status is not RideStatus.REQUESTED:
            driver_name = "Ada"
        ride = RideModel(
            pickup=fields.get("pickup", "Ikeja City Mall"),
            destination=fields.get("destination", "Lekki Phase 1"),
            city=fields.get("city", "Lagos"),
            estimate=fields.get("estimate", 8500.0),
            offered_price=fields.get("offered_price"),
            status=status,
            driver_name=driver_name,
        )
        if ride_id is not None:
            ride.id = ride_id
        async with session_factory() as session:
            session.add(ride)
            await session.commit()
        return ride.id

    return _make


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient against the app, with the DB dependency pointed at SQLite."""
    from ridetrack.api.app import create_app
    from ridetrack.api.dependencies import get_db
    from ridetrack.api.middleware import limiter

    async def _test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    limiter.reset()
    app = create_app()
    app.dependency_overrides[get_db] = _test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

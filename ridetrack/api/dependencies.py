"""FastAPI dependency injection helpers.

One request is one unit of work: the ride service gets a fresh session,
and whatever it wrote is committed only if the handler returned normally.
A domain error (404/409/400) therefore never leaves a partial write behind.
"""

from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ridetrack.infrastructure.database import async_session_factory
from ridetrack.services.rides import RideService


async def get_db() -> AsyncIterator[AsyncSession]:
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        else:
            await session.commit()


def get_ride_service(db: AsyncSession = Depends(get_db)) -> RideService:
    return RideService(db)

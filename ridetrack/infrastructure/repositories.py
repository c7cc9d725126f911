"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import RideModel, utcnow
from ridetrack.domain.enums import RideStatus


class RideRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_ride(
        self,
        *,
        pickup: str,
        destination: str,
        city: str,
        estimate: float,
        offered_price: float | None = None,
    ) -> RideModel:
        ride = RideModel(
            pickup=pickup,
            destination=destination,
            city=city,
            estimate=estimate,
            offered_price=offered_price,
            status=RideStatus.REQUESTED,
        )
        self.session.add(ride)
        await self.session.flush()
        return ride

    async def get_by_id(self, ride_id: str) -> Optional[RideModel]:
        """Read straight from the store, refreshing any cached instance."""
        return await self.session.get(
            RideModel, ride_id, populate_existing=True
        )

    async def list_all(self) -> list[RideModel]:
        result = await self.session.execute(
            select(RideModel).order_by(RideModel.created_at, RideModel.id)
        )
        return list(result.scalars().all())

    async def compare_and_set_status(
        self,
        ride_id: str,
        *,
        expected: RideStatus,
        new: RideStatus,
        driver_name: str | None = None,
    ) -> int:
        """
        ``UPDATE rides SET status = :new ... WHERE id = :id AND status = :expected``.

        Returns the affected-row count: 1 if this caller won, 0 if the ride
        is missing or some other request moved it first.  The row lock the
        store takes for the UPDATE is the only concurrency control.
        """
        values: dict = {"status": new, "updated_at": utcnow()}
        if driver_name is not None:
            values["driver_name"] = driver_name

        result = await self.session.execute(
            update(RideModel)
            .where(RideModel.id == ride_id, RideModel.status == expected)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

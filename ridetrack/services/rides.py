"""
Ride operations
===============

All mutations go through ``RideRepository.compare_and_set_status``: a
single ``UPDATE ... WHERE id = ? AND status = ?``.  Validation and guard
checks run before it, so a failed call never writes anything.

Accept
------
``accept_ride`` does *not* read first.  The ``status = REQUESTED``
predicate is the existence check, the status check and the write in one
statement; when two drivers race, the store lets exactly one UPDATE match
and the loser sees zero affected rows.  Only then do we read, to tell
"never existed" (404) from "already taken" (409).

Transitions
-----------
``request_transition`` reads the ride, checks the transition table, then
writes conditioned on the status it read.  A concurrent change between the
read and the write makes the write miss and surfaces as a conflict rather
than silently overwriting.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ridetrack.domain.enums import RideStatus
from ridetrack.domain.errors import Conflict, InvalidRequest, NotFound
from ridetrack.domain.lifecycle import (
    InvalidStateTransition,
    ensure_transition,
    parse_status,
    require_driver_name,
)
from ridetrack.infrastructure.models import RideModel
from ridetrack.infrastructure.repositories import RideRepository

logger = logging.getLogger(__name__)


class RideService:
    def __init__(self, session: AsyncSession):
        self.rides = RideRepository(session)

    # ── Queries ───────────────────────────────────────────────────────

    async def list_rides(self) -> list[RideModel]:
        return await self.rides.list_all()

    async def get_ride(self, ride_id: str) -> RideModel:
        ride = await self.rides.get_by_id(ride_id)
        if ride is None:
            raise NotFound("Ride not found")
        return ride

    # ── Commands ──────────────────────────────────────────────────────

    async def create_ride(
        self,
        *,
        pickup: str,
        destination: str,
        city: str,
        estimate: float,
        offered_price: Optional[float] = None,
    ) -> RideModel:
        fields = {"pickup": pickup, "destination": destination, "city": city}
        for name, value in fields.items():
            if not value or not value.strip():
                raise InvalidRequest(f"{name} is required")
        amounts = {"estimate": estimate, "offeredPrice": offered_price}
        for name, value in amounts.items():
            if value is None:
                continue
            if not math.isfinite(value):
                raise InvalidRequest(f"{name} must be a finite number")
            if value < 0:
                raise InvalidRequest(f"{name} must not be negative")

        ride = await self.rides.create_ride(
            pickup=pickup.strip(),
            destination=destination.strip(),
            city=city.strip(),
            estimate=estimate,
            offered_price=offered_price,
        )
        logger.info("Ride %s requested in %s", ride.id, ride.city)
        return ride

    async def accept_ride(self, ride_id: str, driver_name: Any) -> RideModel:
        name = require_driver_name(driver_name)

        won = await self.rides.compare_and_set_status(
            ride_id,
            expected=RideStatus.REQUESTED,
            new=RideStatus.ACCEPTED,
            driver_name=name,
        )
        ride = await self.rides.get_by_id(ride_id)
        if ride is None:
            raise NotFound("Ride not found")
        if not won:
            logger.info(
                "Accept by %s lost on ride %s (status %s)",
                name, ride_id, ride.status.value,
            )
            raise Conflict(
                f"Ride not available (current status: {ride.status.value})"
            )

        logger.info("Ride %s accepted by %s", ride_id, name)
        return ride

    async def request_transition(
        self,
        ride_id: str,
        next_status: Any,
        driver_name: Any = None,
    ) -> RideModel:
        requested = parse_status(next_status)

        ride = await self.rides.get_by_id(ride_id)
        if ride is None:
            raise NotFound("Ride not found")

        current = RideStatus(ride.status)
        ensure_transition(current, requested)

        # The driver is only ever recorded on the way into ACCEPTED
        name = None
        if requested is RideStatus.ACCEPTED and driver_name is not None:
            name = require_driver_name(driver_name)

        won = await self.rides.compare_and_set_status(
            ride_id, expected=current, new=requested, driver_name=name
        )
        ride = await self.rides.get_by_id(ride_id)
        if ride is None:
            raise NotFound("Ride not found")
        if not won:
            raise InvalidStateTransition(RideStatus(ride.status), requested)

        logger.info(
            "Ride %s moved %s -> %s", ride_id, current.value, requested.value
        )
        return ride

"""
Polling views
=============

Headless counterparts of the driver dashboard and the rider tracking page.

Each view is a cooperative asyncio loop: fetch, replace local state
wholesale, sleep ``interval`` seconds, repeat.  A failed fetch is recorded
in ``error`` and retried on the next tick.  Actions (accept, advance)
never touch local status directly; they wait for the server's answer and
then refresh.

Views are independent: two dashboards polling the same API do not
coordinate, the server's conditional update decides who wins an accept.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from ridetrack.api.schemas import RideResponse
from ridetrack.client.api import ApiError, RideClient
from ridetrack.config import settings
from ridetrack.domain.enums import (
    ACTIVE_STATUSES,
    REQUESTED_STATUSES,
    TERMINAL_STATUSES,
    RideStatus,
)

logger = logging.getLogger(__name__)

STATUS_LABELS: dict[RideStatus, str] = {
    RideStatus.REQUESTED: "Requested",
    RideStatus.ACCEPTED: "Accepted",
    RideStatus.ARRIVING: "Arriving",
    RideStatus.IN_PROGRESS: "In Trip",
    RideStatus.COMPLETED: "Completed",
    RideStatus.CANCELLED: "Cancelled",
}

# Progress shown to the rider; CANCELLED is off the happy path
TRACKING_STEPS: list[tuple[RideStatus, str, str]] = [
    (RideStatus.REQUESTED, "Requested", "Waiting for a driver"),
    (RideStatus.ACCEPTED, "Accepted", "Driver assigned"),
    (RideStatus.ARRIVING, "Arriving", "Driver is on the way"),
    (RideStatus.IN_PROGRESS, "In progress", "Trip has started"),
    (RideStatus.COMPLETED, "Completed", "Trip finished"),
]


def status_label(status: RideStatus) -> str:
    return STATUS_LABELS[RideStatus(status)]


def tracking_label(status: RideStatus) -> str:
    """Rider-facing label: ``IN_PROGRESS`` reads "In Progress", not "In Trip"."""
    status = RideStatus(status)
    if status is RideStatus.CANCELLED:
        return "Cancelled"
    return " ".join(word.capitalize() for word in status.value.split("_"))


class _PollingView:
    """Base loop shared by the driver and rider views."""

    fallback_error = "Failed to load rides"

    def __init__(self, client: RideClient, interval: float):
        self.client = client
        self.interval = interval
        self.loading = True
        self.error: Optional[str] = None
        self._task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None

    async def _fetch(self) -> None:
        raise NotImplementedError

    async def refresh(self) -> bool:
        """Fetch once.  Returns False (and sets ``error``) on failure."""
        try:
            await self._fetch()
        except (ApiError, httpx.HTTPError) as exc:
            self.error = str(exc) or self.fallback_error
            logger.warning("%s refresh failed: %s", type(self).__name__, self.error)
            return False
        else:
            self.error = None
            return True
        finally:
            self.loading = False

    # ── Loop control ──────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._loop())
        logger.info(
            "%s polling started (interval=%ss)", type(self).__name__, self.interval
        )

    async def stop(self) -> None:
        if self._stop_event:
            self._stop_event.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("%s polling stopped", type(self).__name__)

    async def _loop(self) -> None:
        assert self._stop_event is not None
        while not self._stop_event.is_set():
            await self.refresh()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass


class DriverDashboard(_PollingView):
    """All rides, split into requested / active / recent."""

    def __init__(
        self,
        client: RideClient,
        interval: float | None = None,
        driver_name: str | None = None,
    ):
        super().__init__(
            client,
            settings.driver_poll_interval_seconds if interval is None else interval,
        )
        self.driver_name = driver_name or settings.default_driver_name
        self.rides: list[RideResponse] = []
        self.busy_id: Optional[str] = None

    async def _fetch(self) -> None:
        self.rides = await self.client.list_rides()

    def _with_status(self, statuses: frozenset[RideStatus]) -> list[RideResponse]:
        return [r for r in self.rides if r.status in statuses]

    @property
    def requested(self) -> list[RideResponse]:
        return self._with_status(REQUESTED_STATUSES)

    @property
    def active(self) -> list[RideResponse]:
        return self._with_status(ACTIVE_STATUSES)

    @property
    def recent(self) -> list[RideResponse]:
        return self._with_status(TERMINAL_STATUSES)

    async def accept(self, ride_id: str) -> Optional[RideResponse]:
        """Claim a ride; returns it on success, None if another driver won."""
        return await self._act(
            ride_id,
            self.client.accept_ride(ride_id, self.driver_name),
            "Failed to accept ride",
        )

    async def advance(
        self, ride_id: str, status: RideStatus
    ) -> Optional[RideResponse]:
        return await self._act(
            ride_id,
            self.client.set_ride_status(ride_id, status),
            "Failed to update ride",
        )

    async def _act(self, ride_id, call, fallback: str) -> Optional[RideResponse]:
        self.busy_id = ride_id
        self.error = None
        try:
            ride = await call
        except (ApiError, httpx.HTTPError) as exc:
            self.error = str(exc) or fallback
            logger.info("Action on ride %s failed: %s", ride_id, self.error)
            return None
        finally:
            self.busy_id = None
        await self.refresh()
        return ride


class RiderTracker(_PollingView):
    """One ride, re-fetched every tick."""

    fallback_error = "Ride not found"

    def __init__(
        self, client: RideClient, ride_id: str, interval: float | None = None
    ):
        super().__init__(
            client,
            settings.rider_poll_interval_seconds if interval is None else interval,
        )
        self.ride_id = ride_id
        self.ride: Optional[RideResponse] = None

    async def _fetch(self) -> None:
        self.ride = await self.client.get_ride(self.ride_id)

    @property
    def step_index(self) -> int:
        """Position in ``TRACKING_STEPS``; -1 when unknown or cancelled."""
        if self.ride is None:
            return -1
        for i, (status, _, _) in enumerate(TRACKING_STEPS):
            if status == self.ride.status:
                return i
        return -1

    @property
    def label(self) -> Optional[str]:
        return tracking_label(self.ride.status) if self.ride is not None else None

    @property
    def finished(self) -> bool:
        return self.ride is not None and self.ride.status in TERMINAL_STATUSES

"""
Tests for the HTTP client and the polling views.

Response-shape handling runs against ``httpx.MockTransport``; the
end-to-end cases drive the real app through the ``client`` fixture.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from ridetrack.client.api import ApiError, RideClient, read_json_or_raise
from ridetrack.client.views import (
    DriverDashboard,
    RiderTracker,
    status_label,
    tracking_label,
)
from ridetrack.domain.enums import RideStatus


def _ride(ride_id: str, status: str, driver: str | None = None) -> dict:
    return {
        "id": ride_id,
        "pickup": "Ikeja City Mall",
        "destination": "Lekki Phase 1",
        "city": "Lagos",
        "estimate": 8500,
        "offeredPrice": None,
        "status": status,
        "driverName": driver,
        "createdAt": "2026-10-19T08:00:00+00:00",
        "updatedAt": "2026-10-19T08:00:00+00:00",
    }


def _mock_client(handler) -> RideClient:
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://test"
    )
    return RideClient(client=http)


class TestReadJsonOrRaise:
    def test_html_error_page(self):
        res = httpx.Response(
            500, text="<html>boom</html>", headers={"content-type": "text/html"}
        )
        with pytest.raises(ApiError, match=r"Request failed \(500\). API route not found"):
            read_json_or_raise(res)

    def test_json_error_uses_message(self):
        res = httpx.Response(409, json={"error": "Ride not available (current status: ACCEPTED)"})
        with pytest.raises(ApiError) as info:
            read_json_or_raise(res)
        assert str(info.value) == "Ride not available (current status: ACCEPTED)"
        assert info.value.status_code == 409

    def test_unparsable_error_body(self):
        res = httpx.Response(502, text="bad gateway", headers={"content-type": "text/plain"})
        with pytest.raises(ApiError, match=r"^Request failed \(502\)$"):
            read_json_or_raise(res)

    def test_success_without_json_is_rejected(self):
        res = httpx.Response(200, text="<html>ok</html>", headers={"content-type": "text/html"})
        with pytest.raises(ApiError, match="Server did not return JSON"):
            read_json_or_raise(res)

    def test_success_json(self):
        res = httpx.Response(200, json=[1, 2])
        assert read_json_or_raise(res) == [1, 2]


class TestDriverDashboard:
    @pytest.mark.asyncio
    async def test_refresh_splits_rides(self):
        rides = [
            _ride("a", "REQUESTED"),
            _ride("b", "ARRIVING", "Ada"),
            _ride("c", "COMPLETED", "Ada"),
            _ride("d", "CANCELLED", "Bayo"),
        ]
        client = _mock_client(lambda request: httpx.Response(200, json=rides))
        dashboard = DriverDashboard(client)

        assert await dashboard.refresh()

        assert [r.id for r in dashboard.requested] == ["a"]
        assert [r.id for r in dashboard.active] == ["b"]
        assert [r.id for r in dashboard.recent] == ["c", "d"]
        assert dashboard.error is None
        assert not dashboard.loading

    @pytest.mark.asyncio
    async def test_fetch_error_is_not_fatal(self):
        responses = iter([
            httpx.Response(500, text="<html/>", headers={"content-type": "text/html"}),
            httpx.Response(200, json=[_ride("a", "REQUESTED")]),
        ])
        client = _mock_client(lambda request: next(responses))
        dashboard = DriverDashboard(client)

        assert not await dashboard.refresh()
        assert "Request failed (500)" in dashboard.error

        assert await dashboard.refresh()
        assert dashboard.error is None
        assert len(dashboard.rides) == 1

    @pytest.mark.asyncio
    async def test_transport_error_is_not_fatal(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        dashboard = DriverDashboard(_mock_client(handler))
        assert not await dashboard.refresh()
        assert dashboard.error

    @pytest.mark.asyncio
    async def test_lost_accept_leaves_local_state_alone(self):
        def handler(request):
            if request.method == "PATCH":
                return httpx.Response(
                    409, json={"error": "Ride not available (current status: ACCEPTED)"}
                )
            return httpx.Response(200, json=[_ride("a", "REQUESTED")])

        dashboard = DriverDashboard(_mock_client(handler), driver_name="Bayo")
        await dashboard.refresh()

        assert await dashboard.accept("a") is None

        assert dashboard.rides[0].status is RideStatus.REQUESTED
        assert "current status: ACCEPTED" in dashboard.error
        assert dashboard.busy_id is None

    @pytest.mark.asyncio
    async def test_loop_polls_until_stopped(self):
        calls = 0

        def handler(request):
            nonlocal calls
            calls += 1
            return httpx.Response(200, json=[])

        dashboard = DriverDashboard(_mock_client(handler), interval=0.01)
        await dashboard.start()
        assert dashboard.running
        await asyncio.sleep(0.1)
        await dashboard.stop()

        assert calls >= 2
        assert not dashboard.running
        seen = calls
        await asyncio.sleep(0.05)
        assert calls == seen

    @pytest.mark.asyncio
    async def test_accept_against_app(self, client: httpx.AsyncClient, make_ride):
        ride_id = await make_ride()
        dashboard = DriverDashboard(RideClient(client=client), driver_name="Ada")
        await dashboard.refresh()
        assert [r.id for r in dashboard.requested] == [ride_id]

        ride = await dashboard.accept(ride_id)

        assert ride.status is RideStatus.ACCEPTED
        assert dashboard.requested == []
        assert [r.driver_name for r in dashboard.active] == ["Ada"]

    @pytest.mark.asyncio
    async def test_advance_against_app(self, client: httpx.AsyncClient, make_ride):
        ride_id = await make_ride(RideStatus.IN_PROGRESS)
        dashboard = DriverDashboard(RideClient(client=client))

        ride = await dashboard.advance(ride_id, RideStatus.COMPLETED)

        assert ride.status is RideStatus.COMPLETED
        assert [r.id for r in dashboard.recent] == [ride_id]


class TestRiderTracker:
    @pytest.mark.asyncio
    async def test_tracks_progress(self, client: httpx.AsyncClient):
        rides = RideClient(client=client)
        created = await rides.create_ride(
            pickup="Wuse Market", destination="Airport", city="Abuja", estimate=12000
        )
        tracker = RiderTracker(rides, created.id)

        await tracker.refresh()
        assert tracker.step_index == 0

        await rides.accept_ride(created.id, "Chidi")
        await rides.update_ride(created.id, RideStatus.ARRIVING)
        await tracker.refresh()

        assert tracker.ride.driver_name == "Chidi"
        assert tracker.step_index == 2
        assert not tracker.finished

    @pytest.mark.asyncio
    async def test_missing_ride_sets_error(self, client: httpx.AsyncClient):
        tracker = RiderTracker(RideClient(client=client), "ghost")
        assert not await tracker.refresh()
        assert tracker.error == "Ride not found"
        assert tracker.ride is None

    @pytest.mark.asyncio
    async def test_cancelled_is_off_the_steps(self):
        client = _mock_client(
            lambda request: httpx.Response(200, json=_ride("a", "CANCELLED", "Ada"))
        )
        tracker = RiderTracker(client, "a")
        await tracker.refresh()
        assert tracker.step_index == -1
        assert tracker.finished
        assert tracker.label == "Cancelled"


def test_status_labels_cover_every_status():
    assert status_label(RideStatus.IN_PROGRESS) == "In Trip"
    assert len({status_label(s) for s in RideStatus}) == len(RideStatus)


def test_rider_and_driver_labels_differ_for_trip_in_progress():
    assert tracking_label(RideStatus.IN_PROGRESS) == "In Progress"
    assert status_label(RideStatus.IN_PROGRESS) == "In Trip"
    assert tracking_label(RideStatus.REQUESTED) == "Requested"

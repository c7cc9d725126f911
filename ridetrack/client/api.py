"""
Async HTTP client for the ride API.

Every response goes through ``read_json_or_raise`` so an HTML error page
or a non-JSON success never reaches the caller as data.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ridetrack.api.schemas import RideResponse
from ridetrack.config import settings
from ridetrack.domain.enums import RideStatus


class ApiError(Exception):
    """A request failed; ``str(exc)`` is safe to show to a user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def read_json_or_raise(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    code = response.status_code

    if not response.is_success:
        if "text/html" in content_type:
            raise ApiError(
                f"Request failed ({code}). API route not found or crashed.",
                code,
            )
        try:
            data = response.json()
        except ValueError:
            data = None
        message = data.get("error") if isinstance(data, dict) else None
        raise ApiError(
            message if isinstance(message, str) and message
            else f"Request failed ({code})",
            code,
        )

    if "application/json" not in content_type:
        raise ApiError("Server did not return JSON. Check API routes.", code)

    try:
        return response.json()
    except ValueError:
        raise ApiError("Server did not return JSON. Check API routes.", code) from None


def _to_ride(data: Any) -> RideResponse:
    try:
        return RideResponse.model_validate(data)
    except ValidationError:
        raise ApiError("Server returned an unexpected ride payload") from None


class RideClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self.http = client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url, timeout=timeout
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()

    async def __aenter__(self) -> "RideClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    # ── Rider ─────────────────────────────────────────────────────────

    async def create_ride(
        self,
        *,
        pickup: str,
        destination: str,
        city: str,
        estimate: float,
        offered_price: float | None = None,
    ) -> RideResponse:
        payload: dict[str, Any] = {
            "pickup": pickup,
            "destination": destination,
            "city": city,
            "estimate": estimate,
        }
        if offered_price is not None:
            payload["offeredPrice"] = offered_price
        res = await self.http.post("/rides", json=payload)
        return _to_ride(read_json_or_raise(res))

    async def list_rides(self) -> list[RideResponse]:
        res = await self.http.get("/rides", headers={"Cache-Control": "no-store"})
        data = read_json_or_raise(res)
        if not isinstance(data, list):
            raise ApiError("Server returned an unexpected ride list")
        return [_to_ride(item) for item in data]

    async def get_ride(self, ride_id: str) -> RideResponse:
        res = await self.http.get(
            f"/rides/{ride_id}", headers={"Cache-Control": "no-store"}
        )
        return _to_ride(read_json_or_raise(res))

    # ── Driver ────────────────────────────────────────────────────────

    async def update_ride(
        self,
        ride_id: str,
        status: RideStatus,
        driver_name: str | None = None,
    ) -> RideResponse:
        payload: dict[str, Any] = {"status": RideStatus(status).value}
        if driver_name is not None:
            payload["driverName"] = driver_name
        res = await self.http.patch(f"/rides/{ride_id}", json=payload)
        return _to_ride(read_json_or_raise(res))

    async def accept_ride(self, ride_id: str, driver_name: str) -> RideResponse:
        res = await self.http.patch(
            f"/rides/{ride_id}/accept", json={"driverName": driver_name}
        )
        return _to_ride(read_json_or_raise(res))

    async def set_ride_status(
        self, ride_id: str, status: RideStatus
    ) -> RideResponse:
        res = await self.http.patch(
            f"/rides/{ride_id}/status", json={"status": RideStatus(status).value}
        )
        return _to_ride(read_json_or_raise(res))

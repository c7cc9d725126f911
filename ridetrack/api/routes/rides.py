"""
Ride endpoints
==============

GET   /rides               -- every ride, creation order
POST  /rides               -- create a ride request
GET   /rides/{ride_id}     -- one ride
PATCH /rides/{ride_id}     -- move to a new status (``driverName`` used on ACCEPTED)
PATCH /rides/{ride_id}/accept -- atomically claim a REQUESTED ride
PATCH /rides/{ride_id}/status -- move to a new status

``PATCH /rides/{id}`` and ``/status`` share one transition guard; the
former only adds the optional driver name.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request

from ridetrack.api.dependencies import get_ride_service
from ridetrack.api.middleware import current_rate_limit, limiter
from ridetrack.api.schemas import (
    ErrorResponse,
    RideAcceptRequest,
    RideCreateRequest,
    RideResponse,
    RideStatusRequest,
    RideUpdateRequest,
)
from ridetrack.services.rides import RideService

router = APIRouter(prefix="/rides", tags=["rides"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Missing or invalid input"},
    404: {"model": ErrorResponse, "description": "Ride not found"},
    409: {"model": ErrorResponse, "description": "Not allowed in current status"},
    500: {"model": ErrorResponse, "description": "Unexpected failure"},
}


@router.get("", response_model=list[RideResponse], summary="List all rides")
@limiter.limit(current_rate_limit)
async def list_rides(
    request: Request,
    rides: RideService = Depends(get_ride_service),
):
    return await rides.list_rides()


@router.post(
    "",
    status_code=201,
    response_model=RideResponse,
    summary="Create a ride request",
    responses={400: _ERRORS[400]},
)
@limiter.limit(current_rate_limit)
async def create_ride(
    request: Request,
    body: RideCreateRequest,
    rides: RideService = Depends(get_ride_service),
):
    return await rides.create_ride(
        pickup=body.pickup,
        destination=body.destination,
        city=body.city,
        estimate=body.estimate,
        offered_price=body.offered_price,
    )


@router.get(
    "/{ride_id}",
    response_model=RideResponse,
    summary="Get one ride",
    responses={404: _ERRORS[404]},
)
@limiter.limit(current_rate_limit)
async def get_ride(
    request: Request,
    ride_id: str,
    rides: RideService = Depends(get_ride_service),
):
    return await rides.get_ride(ride_id)


@router.patch(
    "/{ride_id}",
    response_model=RideResponse,
    summary="Update ride status",
    responses=_ERRORS,
)
@limiter.limit(current_rate_limit)
async def update_ride(
    request: Request,
    ride_id: str,
    body: Optional[RideUpdateRequest] = None,
    rides: RideService = Depends(get_ride_service),
):
    body = body or RideUpdateRequest()
    return await rides.request_transition(
        ride_id, body.status, driver_name=body.driver_name
    )


@router.patch(
    "/{ride_id}/accept",
    response_model=RideResponse,
    summary="Accept a requested ride",
    description=(
        "Moves a REQUESTED ride to ACCEPTED for the named driver in a "
        "single conditional update.  When drivers race, exactly one wins; "
        "the others get 409 with the ride's current status."
    ),
    responses=_ERRORS,
)
@limiter.limit(current_rate_limit)
async def accept_ride(
    request: Request,
    ride_id: str,
    body: Optional[RideAcceptRequest] = None,
    rides: RideService = Depends(get_ride_service),
):
    body = body or RideAcceptRequest()
    return await rides.accept_ride(ride_id, body.driver_name)


@router.patch(
    "/{ride_id}/status",
    response_model=RideResponse,
    summary="Advance ride status",
    responses=_ERRORS,
)
@limiter.limit(current_rate_limit)
async def set_ride_status(
    request: Request,
    ride_id: str,
    body: Optional[RideStatusRequest] = None,
    rides: RideService = Depends(get_ride_service),
):
    body = body or RideStatusRequest()
    return await rides.request_transition(ride_id, body.status)

"""Pydantic request / response schemas for the REST API.

Wire names are camelCase (``driverName``, ``offeredPrice``, ``createdAt``);
Python attributes stay snake_case.  Request fields that the service layer
validates itself (``status``, ``driverName``) are typed loosely here so
that a missing or unknown value yields the service's own message.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from ridetrack.domain.enums import RideStatus

_CAMEL = {"alias_generator": to_camel, "populate_by_name": True}


# ── Requests ──────────────────────────────────────────────────────────


class RideCreateRequest(BaseModel):
    pickup: str = Field(..., max_length=500)
    destination: str = Field(..., max_length=500)
    city: str = Field(..., max_length=120)
    estimate: float = Field(..., ge=0, allow_inf_nan=False)
    offered_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)

    model_config = _CAMEL


class RideUpdateRequest(BaseModel):
    status: Optional[str] = None
    driver_name: Optional[str] = None

    model_config = _CAMEL


class RideAcceptRequest(BaseModel):
    driver_name: Optional[str] = None

    model_config = _CAMEL


class RideStatusRequest(BaseModel):
    status: Optional[str] = None

    model_config = _CAMEL


# ── Responses ─────────────────────────────────────────────────────────


class RideResponse(BaseModel):
    id: str
    pickup: str
    destination: str
    city: str
    estimate: float
    offered_price: Optional[float] = None
    status: RideStatus
    driver_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {**_CAMEL, "from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    error: str

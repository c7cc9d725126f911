"""
Status Transition Guard.

Every status change goes through ``ensure_transition`` before it reaches
the store.  The accept shortcut skips the read and folds the
``REQUESTED`` check into its conditional update instead.
"""

from __future__ import annotations

from typing import Any

from .enums import RIDE_TRANSITIONS, RideStatus
from .errors import Conflict, InvalidRequest

VALID_STATUSES = ", ".join(s.value for s in RideStatus)

# Width of the rides.driver_name column
MAX_DRIVER_NAME_LENGTH = 120


class InvalidStateTransition(Conflict):
    """Raised when a ride status change violates the state machine."""

    def __init__(self, current: RideStatus, requested: RideStatus):
        super().__init__(
            f"Invalid transition: {current.value} -> {requested.value}"
        )
        self.current = current
        self.requested = requested


def parse_status(value: Any) -> RideStatus:
    """Turn raw request input into a ``RideStatus`` or raise ``InvalidRequest``."""
    if value is None or value == "":
        raise InvalidRequest("status is required")
    if isinstance(value, RideStatus):
        return value
    if not isinstance(value, str):
        raise InvalidRequest(f"Invalid status. Use one of: {VALID_STATUSES}")
    try:
        return RideStatus(value)
    except ValueError:
        raise InvalidRequest(
            f"Invalid status. Use one of: {VALID_STATUSES}"
        ) from None


def can_transition(current: RideStatus, requested: RideStatus) -> bool:
    return requested in RIDE_TRANSITIONS[current]


def ensure_transition(current: RideStatus, requested: RideStatus) -> None:
    """Raise ``InvalidStateTransition`` unless *current* -> *requested* is legal."""
    if not can_transition(current, requested):
        raise InvalidStateTransition(current, requested)


def require_driver_name(value: Any) -> str:
    """Return the name exactly as supplied once it is known to be usable."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequest("driverName is required")
    if len(value) > MAX_DRIVER_NAME_LENGTH:
        raise InvalidRequest(
            f"driverName must be at most {MAX_DRIVER_NAME_LENGTH} characters"
        )
    return value

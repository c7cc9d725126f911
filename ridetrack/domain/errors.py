"""
Error taxonomy shared by the service layer and the HTTP adapter.

Each error carries the HTTP status it maps to so the API layer can render
``{"error": <message>}`` without a lookup table.
"""


class RideError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(RideError):
    """Malformed, missing or unrecognised input."""

    status_code = 400


class NotFound(RideError):
    """No ride with the given id."""

    status_code = 404


class Conflict(RideError):
    """Well-formed request that is illegal given the ride's current state."""

    status_code = 409


class Internal(RideError):
    status_code = 500

    def __init__(self, message: str = "Server error"):
        super().__init__(message)

"""Rate limiting and the catch-all error boundary."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from ridetrack.config import settings
from ridetrack.domain.errors import Internal

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)


def current_rate_limit() -> str:
    """Per-route limit, read on every request so it follows ``settings``."""
    return settings.rate_limit


async def catch_unexpected_errors(request: Request, call_next):
    """Turn anything the exception handlers did not claim into a JSON 500."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception("%s %s crashed", request.method, request.url.path)
        error = Internal()
        return JSONResponse({"error": error.message}, status_code=error.status_code)

"""
FastAPI application factory.

* Registers ride and health routes.
* Maps domain errors, validation failures and crashes to ``{"error": ...}``.
* Applies rate-limiting.
* Swagger / OpenAPI UI available at ``/docs``.
"""

import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ridetrack.api.errors import register_exception_handlers
from ridetrack.api.middleware import catch_unexpected_errors, limiter
from ridetrack.api.routes import health, rides
from ridetrack.config import settings

logging.basicConfig(level=settings.log_level)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Ride Status Tracker API",
        description=(
            "Riders request trips, drivers accept them, and both sides "
            "poll for status.  Acceptance is at-most-once per ride."
        ),
        version="1.0.0",
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)
    app.middleware("http")(catch_unexpected_errors)

    # Routers
    app.include_router(rides.router)
    app.include_router(health.router)

    return app

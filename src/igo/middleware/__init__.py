"""Middleware registration."""

from fastapi import FastAPI

from igo.config import Settings
from igo.middleware.cors import setup_cors
from igo.middleware.error_handler import setup_error_handlers
from igo.middleware.logging import setup_logging
from igo.middleware.rate_limit import RateLimitMiddleware
from igo.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register logging, error handlers and middleware.

    Starlette runs middleware in reverse-add order, so CORS (added last) is
    outermost and also wraps 429 responses from the rate limiter.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            requests_per_window=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)

"""Middleware registration."""

from fastapi import FastAPI

from loro.config import Settings
from loro.middleware.cors import setup_cors
from loro.middleware.error_handler import setup_error_handlers
from loro.middleware.logging import setup_logging
from loro.middleware.rate_limit import RateLimitMiddleware
from loro.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register logging, error handlers and the HTTP middleware stack.

    Starlette runs middleware outermost-last, so CORS is added after the
    rate limiter to keep its headers on 429 responses.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)

"""Middleware registration."""

from fastapi import FastAPI

from socialquest.config import Settings
from socialquest.middleware.body_limit import BodySizeLimitMiddleware
from socialquest.middleware.cors import setup_cors
from socialquest.middleware.error_handler import setup_error_handlers
from socialquest.middleware.logging import setup_logging
from socialquest.middleware.rate_limit import RateLimitMiddleware
from socialquest.middleware.request_id import RequestIdMiddleware
from socialquest.middleware.security_headers import SecurityHeadersMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware in the correct order.

    Starlette executes middleware in reverse-add order (last added = outermost).
    CORS must be outermost so it wraps 413 and 429 responses.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
        path_prefixes=settings.rate_limit_path_prefixes,
    )
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)

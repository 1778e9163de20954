# app/middleware/middleware.py
"""
Middleware components for the Blog API backend.

This module contains middleware for security headers, request logging and
CORS handling, plus the lifespan event handler for database startup and
cleanup.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from rich.traceback import install
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from app.configs import settings
from app.db import close_db, init_db
from app.managers.rate_limiter import close_limiter
from app.monitoring import bind_request_id, clear_context
from app.utils.helpers import file_logger, get_summary, host

logger = file_logger(getLogger("app.http"))

REQUEST_ID_HEADER = "X-Request-ID"

if settings.ENVIRONMENT == "development":
    install(show_locals=False)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Manage application startup and shutdown events."""
    logger.info(f"Starting {app.title} ({settings.ENVIRONMENT})...")

    if settings.ENVIRONMENT != "production":
        # Deployed schemas are managed by Alembic
        await init_db()

    logger.info("Services initialized successfully")
    logger.info("  - API Documentation: /docs")
    logger.info("  - Health Check: /health")
    logger.info("  - Metrics: /metrics")

    yield

    logger.info(f"Shutting down {app.title}...")
    await close_db()
    await close_limiter()
    logger.info("Services cleaned up successfully")


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware for the application."""
    allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    if settings.FRONTEND_URL not in allowed_origins:
        allowed_origins.append(settings.FRONTEND_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request summary and timing, and tag the request with an id."""
        clear_context()
        request_id = (request.headers.get(REQUEST_ID_HEADER) or uuid4().hex)[:64]
        bind_request_id(request_id)

        start_time = perf_counter()
        summary = get_summary(request)

        route_info = summary or f"{request.method} {request.url.path}"
        logger.info(f"Request: {route_info}, from ip: {host(request)}")

        response = await call_next(request)
        duration = perf_counter() - start_time

        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url.path} "
            f"in {duration:.3f}s",
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to all responses."""

        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

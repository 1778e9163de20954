# app/main.py

"""Blog API backend: authentication and blog posts over FastAPI and PostgreSQL."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.configs import settings
from app.db import ping_db
from app.errors import (
    DatabaseError,
    PasswordHashingError,
    UserAuthenticationError,
    ValidationError,
    app_validation_exception_handler,
    auth_exception_handler,
    database_exception_handler,
    http_exception_handler,
    password_hashing_exception_handler,
    validation_exception_handler,
)
from app.errors.auth import ForbiddenError
from app.managers import get_system_metrics, limiter, metrics_manager, rate_limit_exceeded_handler
from app.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from app.monitoring import configure_logging, get_logger
from app.routes import auth_router, blog_router
from app.schemas.common import HealthResponse
from app.utils.helpers import today_str

configure_logging()
logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog API: accounts, posts, filtering and search",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")


routes = [
    auth_router,
    blog_router,
]

_ = [app.include_router(router) for router in routes]

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (UserAuthenticationError, auth_exception_handler),
    (ForbiddenError, auth_exception_handler),
    (ValidationError, app_validation_exception_handler),
    (PasswordHashingError, password_hashing_exception_handler),
    (DatabaseError, database_exception_handler),
    (SQLAlchemyError, database_exception_handler),
    (RequestValidationError, validation_exception_handler),
    (StarletteHTTPException, http_exception_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "status": "healthy",
                        "database": "up",
                        "environment": "production",
                        "timestamp": "2025-01-01 10:00:00",
                    },
                },
            },
        },
        503: {"description": "Database unreachable"},
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> ORJSONResponse:
    """
    Liveness probe including a database round trip.

    Returns
    -------
    ORJSONResponse
        200 when the database answers, 503 otherwise.
    """
    try:
        database_up = await ping_db()
    except (SQLAlchemyError, OSError):
        logger.exception("Health check database probe failed")
        database_up = False

    health = HealthResponse(
        status="healthy" if database_up else "unhealthy",
        database="up" if database_up else "down",
        environment=settings.ENVIRONMENT,
        timestamp=today_str(),
    )
    return ORJSONResponse(
        content=health.model_dump(),
        status_code=200 if database_up else HTTP_503_SERVICE_UNAVAILABLE,
    )


@app.get(
    "/metrics",
    tags=["📈 Metrics"],
    response_class=ORJSONResponse,
    summary="Get metrics",
    description="Get API performance metrics.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "timestamp": "2025-01-01 10:00:00",
                        "api_metrics": {
                            "request_counts": {"/blogs": 10},
                            "client_error_counts": {"/blogs/by-id": 1},
                            "server_error_counts": {},
                            "response_times": {
                                "/blogs": {"avg": 0.012, "p95": 0.031, "max": 0.045},
                            },
                            "rate_limit_hits": 0,
                        },
                        "system_metrics": {"cpu_percent": 4.2},
                    },
                },
            },
        },
    },
    operation_id="get_metrics",
)
@limiter.limit("5/minute")
async def get_metrics(request: Request) -> ORJSONResponse:
    """
    Get API performance metrics.

    Notes
    -----
    Rate limited to 5 requests per minute.
    """
    return ORJSONResponse(
        content={
            "timestamp": today_str(),
            "api_metrics": metrics_manager.get_metrics(),
            "system_metrics": await get_system_metrics(),
        },
    )


@app.get(
    "/",
    tags=["🏠 Root"],
    summary="Root access",
    response_model=dict[str, str],
    response_class=ORJSONResponse,
    operation_id="root_access",
)
async def root() -> dict[str, str]:
    return {"message": f"Welcome to {settings.APP_NAME}"}


if __name__ == "__main__":
    from uvicorn import run

    run("app.main:app", host="127.0.0.1", port=8000, log_level="info", reload=True)

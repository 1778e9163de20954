from logging import getLogger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from app.configs import DEFAULT_ERROR_MESSAGE, settings
from app.errors.base import BaseAppError, create_exception_handler
from app.utils.helpers import file_logger, host

logger = file_logger(getLogger(__name__))


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DatabaseConnectionError(DatabaseError):
    """Exception raised when database connection fails."""

    def __init__(
        self,
        detail: str = "Failed to connect to the database",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


class DatabaseInitializationError(DatabaseError):
    """Exception raised when database initialization fails."""

    def __init__(
        self,
        detail: str = "Failed to initialize database",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


class DuplicateEntryError(DatabaseError):
    """Exception raised when attempting to create a duplicate entry."""

    def __init__(
        self,
        detail: str = "A record with this value already exists",
    ) -> None:
        super().__init__(detail, HTTP_409_CONFLICT)


class RecordNotFoundError(DatabaseError):
    """Exception raised when a record is not found."""

    def __init__(
        self,
        detail: str = "Record not found",
    ) -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


_client_error_handler = create_exception_handler(logger)


async def database_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """
    Render database errors.

    Conflicts and missing records are client errors and keep their message.
    Anything else is a store failure: it is logged with its traceback and only
    a generic message leaves the process in production.
    """
    status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code < HTTP_500_INTERNAL_SERVER_ERROR:
        return await _client_error_handler(request, exc)

    logger.error(
        f"Store failure for ip: {host(request)} at endpoint {request.url.path}",
        exc_info=exc,
    )
    content: dict[str, str] = {"error": DEFAULT_ERROR_MESSAGE}
    if not settings.is_production:
        content["message"] = str(getattr(exc, "detail", exc))
    return ORJSONResponse(content=content, status_code=HTTP_500_INTERNAL_SERVER_ERROR)

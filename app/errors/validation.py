"""Custom validation error handling for FastAPI."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from app.errors.base import BaseAppError, create_exception_handler
from app.utils.helpers import file_logger, host

logger = file_logger(getLogger(__name__))


class ValidationError(BaseAppError):
    """Raised by application code for input that passed parsing but is still invalid."""

    def __init__(
        self,
        detail: str = "Validation failed",
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.details = details or []


def format_errors(errors: list[dict]) -> list[dict]:
    """Flatten pydantic error entries into ``{field, message, type}`` items."""
    formatted_errors = []
    for error in errors:
        formatted_error = {
            # Skip the location prefix ('body', 'query', 'path')
            "field": ".".join(str(loc) for loc in error.get("loc", [])[1:]),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "validation_error"),
        }
        # Convert non-serializable values (like ValueError) to strings
        if "ctx" in error:
            formatted_error["context"] = {
                key: str(value) if isinstance(value, Exception) else value
                for key, value in error["ctx"].items()
            }
        formatted_errors.append(formatted_error)
    return formatted_errors


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle Pydantic validation errors with the common error envelope.

    Submitted values are deliberately left out of the response so secrets
    never echo back.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with formatted validation errors.
    """
    exec_error = cast(RequestValidationError, exc)
    formatted_errors = format_errors(list(exec_error.errors()))

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: "
        f"{[e['field'] for e in formatted_errors]}",
    )

    return ORJSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation failed",
            "details": formatted_errors,
        },
    )


app_validation_exception_handler = create_exception_handler(logger)

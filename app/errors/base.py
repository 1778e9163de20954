from collections.abc import Awaitable, Callable
from logging import Logger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from app.utils.helpers import host

_RESERVED_ATTRS = ("status_code", "detail", "headers")


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        self.headers = headers

    def __str__(self) -> str:
        return self.detail


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    The response body is ``{"error": detail}`` extended with any extra public
    attributes carried by the exception (for example ``details``).

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
        detail = getattr(exc, "detail", "Internal Server Error")
        headers = getattr(exc, "headers", None)

        logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        content = {"error": detail}
        content.update(
            {
                k: v
                for k, v in exc.__dict__.items()
                if k not in _RESERVED_ATTRS and not k.startswith("_")
            },
        )

        return ORJSONResponse(content=content, status_code=status_code, headers=headers)

    return handler

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_404_NOT_FOUND

from app.utils.helpers import file_logger, host

logger = file_logger(getLogger(__name__))


async def http_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """
    Render framework HTTP errors with the common error envelope.

    Unknown routes get ``{"error": "Route not found", "message": "Cannot <METHOD> <path>"}``.
    """
    http_exc = cast(StarletteHTTPException, exc)
    if http_exc.status_code == HTTP_404_NOT_FOUND and http_exc.detail == "Not Found":
        logger.info(f"Route not found for ip: {host(request)}: {request.method} {request.url.path}")
        return ORJSONResponse(
            status_code=HTTP_404_NOT_FOUND,
            content={
                "error": "Route not found",
                "message": f"Cannot {request.method} {request.url.path}",
            },
        )

    return ORJSONResponse(
        status_code=http_exc.status_code,
        content={"error": http_exc.detail},
        headers=http_exc.headers,
    )

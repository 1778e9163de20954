from collections.abc import MutableMapping
from datetime import datetime
from logging import INFO, Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from pythonjsonlogger.json import JsonFormatter
from starlette.routing import BaseRoute, Match, Route

from app.configs import settings

_FILE_HANDLER_NAME = "app-json-file"


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return the current local time as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def file_logger(logger: Logger) -> Logger:
    """
    Attach the shared rotating JSON file handler to a logger.

    The handler is only attached when ``LOG_TO_FILE`` is enabled and only
    once per logger, so calling this at import time is safe.

    Args:
        logger: Logger to extend.

    Returns:
        Logger: The same logger instance.
    """
    if not settings.LOG_TO_FILE:
        return logger

    if any(handler.get_name() == _FILE_HANDLER_NAME for handler in logger.handlers):
        return logger

    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
    handler.set_name(_FILE_HANDLER_NAME)
    handler.setLevel(INFO)
    handler.setFormatter(JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        is_api_route = type(route) is APIRoute
        is_route = type(route) is Route
        if is_api_route and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if is_route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary


def page_count(total: int, limit: int) -> int:
    """Return the number of pages needed for ``total`` rows of ``limit`` each."""
    if limit <= 0:
        return 0
    return -(-total // limit)

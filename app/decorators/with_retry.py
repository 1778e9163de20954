"""Retry policy for transient failures, built on tenacity."""

from collections.abc import Awaitable, Callable
from logging import WARNING, getLogger
from typing import ParamSpec, TypeVar

from sqlalchemy.exc import InterfaceError, OperationalError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))

P = ParamSpec("P")
T = TypeVar("T")

# Network hiccups and a database that is still starting up
RETRIABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    OperationalError,
    InterfaceError,
)


def with_retry(
    max_retries: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
    exec_retry: type[Exception] | tuple[type[Exception], ...] = RETRIABLE_EXCEPTIONS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async callable with exponential backoff.

    The last exception is re-raised once attempts are exhausted, so callers
    see the original error type.

    Args:
        max_retries: Total number of attempts.
        base_delay: First delay in seconds; doubles on each attempt.
        max_delay: Upper bound for a single delay in seconds.
        exec_retry: Exception type or types that trigger another attempt.

    Returns:
        Decorator applying the policy.

    Example:
        @with_retry(max_retries=5, base_delay=0.5)
        async def init_db() -> None:
            ...
    """
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=base_delay, min=base_delay, max=max_delay),
        retry=retry_if_exception_type(exec_retry),
        before_sleep=before_sleep_log(logger, WARNING),
        reraise=True,
    )

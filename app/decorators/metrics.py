"""Route timing decorator."""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from app.managers.metrics import MetricsManager, RequestTimer

P = ParamSpec("P")
R = TypeVar("R")


def timed(
    endpoint: str | None = None,
    metrics: MetricsManager | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Record call count, latency and failures of an async route handler.

    Place it above ``@limiter.limit`` so rejected calls are counted too.

    Args:
        endpoint: Label under which the calls are recorded (defaults to the function name).
        metrics: Metrics manager to record into (defaults to the global one).

    Example:
        @router.get("/blogs")
        @timed("/blogs")
        @limiter.limit(READ_LIMIT)
        async def list_blogs(request: Request) -> BlogPageResponse:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        label = endpoint or func.__name__

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            async with RequestTimer(label, metrics):
                return await func(*args, **kwargs)

        return wrapper

    return decorator

"""
In-process request metrics for the ``/metrics`` endpoint.

Counters are kept per endpoint label (the one given to ``@timed``). Failures
are split by who caused them: application errors carrying a 4xx status
(missing post, wrong owner, bad query) count as client errors, anything else
that escapes a handler counts as a server error.
"""

from asyncio import to_thread
from collections import defaultdict, deque
from dataclasses import asdict, dataclass, field
from logging import getLogger
from threading import Lock
from time import perf_counter
from types import TracebackType
from typing import Any, Self

from psutil import cpu_percent, disk_usage, virtual_memory
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from app.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))

_BYTES_PER_MB = 1024 * 1024
_WINDOW = 1000  # latest samples kept per endpoint
_CPU_SAMPLE_INTERVAL = 0.1


@dataclass(slots=True)
class LatencyWindow:
    """Sliding window of the most recent durations for one endpoint."""

    samples: deque[float] = field(default_factory=lambda: deque(maxlen=_WINDOW))
    total: float = 0.0

    def add(self, duration: float) -> None:
        if len(self.samples) == self.samples.maxlen:
            self.total -= self.samples[0]
        self.samples.append(duration)
        self.total += duration

    @property
    def average(self) -> float:
        return self.total / len(self.samples) if self.samples else 0.0

    @property
    def p95(self) -> float:
        if not self.samples:
            return 0.0
        ordered = sorted(self.samples)
        return ordered[min(len(ordered) - 1, int(len(ordered) * 0.95))]

    def summary(self) -> dict[str, float]:
        return {
            "avg": round(self.average, 6),
            "p95": round(self.p95, 6),
            "max": round(max(self.samples, default=0.0), 6),
        }


def is_client_error(exc: BaseException | None) -> bool:
    """Return True for exceptions that map to a 4xx response."""
    status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
    return isinstance(status_code, int) and status_code < HTTP_500_INTERNAL_SERVER_ERROR


class MetricsManager:
    """Thread-safe counters and latency windows keyed by endpoint label."""

    __slots__ = (
        "_lock",
        "_requests",
        "_client_errors",
        "_server_errors",
        "_latency",
        "_rate_limit_hits",
    )

    def __init__(self) -> None:
        self._lock = Lock()
        self._requests: dict[str, int] = defaultdict(int)
        self._client_errors: dict[str, int] = defaultdict(int)
        self._server_errors: dict[str, int] = defaultdict(int)
        self._latency: dict[str, LatencyWindow] = defaultdict(LatencyWindow)
        self._rate_limit_hits = 0

    def record_request(self, endpoint: str) -> None:
        with self._lock:
            self._requests[endpoint] += 1

    def record_error(self, endpoint: str, exc: BaseException | None = None) -> None:
        """
        Count a failed call.

        Args:
            endpoint: Endpoint label.
            exc: The exception that ended the call, used to classify it.
        """
        with self._lock:
            if is_client_error(exc):
                self._client_errors[endpoint] += 1
            else:
                self._server_errors[endpoint] += 1

    def record_response_time(self, endpoint: str, duration: float) -> None:
        with self._lock:
            self._latency[endpoint].add(duration)

    def record_rate_limit_hit(self) -> None:
        with self._lock:
            self._rate_limit_hits += 1

    def get_metrics(self) -> dict[str, Any]:
        """Return a consistent snapshot of every counter."""
        with self._lock:
            return {
                "request_counts": dict(self._requests),
                "client_error_counts": dict(self._client_errors),
                "server_error_counts": dict(self._server_errors),
                "response_times": {
                    endpoint: window.summary()
                    for endpoint, window in self._latency.items()
                    if window.samples
                },
                "rate_limit_hits": self._rate_limit_hits,
            }

    def reset_metrics(self) -> None:
        with self._lock:
            self._requests.clear()
            self._client_errors.clear()
            self._server_errors.clear()
            self._latency.clear()
            self._rate_limit_hits = 0
        logger.info("Metrics reset")


metrics_manager = MetricsManager()


class RequestTimer:
    """
    Time one handler call and record it.

    Usable as a sync or async context manager. Exceptions are recorded and
    then propagate unchanged.
    """

    __slots__ = ("_endpoint", "_start_time", "_metrics")

    def __init__(self, endpoint: str, metrics: MetricsManager | None = None) -> None:
        self._endpoint = endpoint
        self._start_time = 0.0
        self._metrics = metrics or metrics_manager

    def __enter__(self) -> Self:
        self._start_time = perf_counter()
        self._metrics.record_request(self._endpoint)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        self._metrics.record_response_time(self._endpoint, perf_counter() - self._start_time)
        if exc_type is not None:
            self._metrics.record_error(self._endpoint, exc_val)

    async def __aenter__(self) -> Self:
        return self.__enter__()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)

    @property
    def elapsed(self) -> float:
        return perf_counter() - self._start_time if self._start_time else 0.0


@dataclass(slots=True, frozen=True)
class SystemMetrics:
    """Host resource snapshot."""

    cpu_percent: float
    memory_percent: float
    memory_used_mb: float
    memory_total_mb: float
    disk_percent: float


def _collect_system_metrics() -> SystemMetrics:
    memory = virtual_memory()
    return SystemMetrics(
        cpu_percent=cpu_percent(interval=_CPU_SAMPLE_INTERVAL),
        memory_percent=memory.percent,
        memory_used_mb=round(memory.used / _BYTES_PER_MB, 2),
        memory_total_mb=round(memory.total / _BYTES_PER_MB, 2),
        disk_percent=disk_usage("/").percent,
    )


async def get_system_metrics() -> dict[str, Any]:
    """
    Collect host metrics off the event loop.

    Returns:
        Snapshot as a dict, or ``{"error": ...}`` when the host refuses.
    """
    try:
        return asdict(await to_thread(_collect_system_metrics))
    except OSError:
        logger.exception("Failed to collect system metrics")
        return {"error": "Failed to collect system metrics"}

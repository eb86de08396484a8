"""In-process duration and error recording.

Observations are keyed by (subsystem, event), for example
``("hue", "remote_update")`` or ``("client", "push_states")``. Each key
keeps a cumulative histogram over fixed buckets, a running sum, a count,
and an error count. Every observation is also logged at DEBUG.
"""

import logging
import threading
from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from wnpbridge.device import DeviceRequest

logger = logging.getLogger(__name__)

# Upper bounds in seconds; anything slower lands in the +Inf bucket
DEFAULT_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


@runtime_checkable
class ObservabilitySink(Protocol):
    """Anything that can record durations and errors by (subsystem, event)."""

    def observe_duration(self, subsystem: str, event: str, seconds: float) -> None: ...

    def record_error(self, subsystem: str, event: str, error: Exception) -> None: ...


@dataclass
class DurationStats:
    """Histogram and totals for one (subsystem, event) key."""

    buckets: tuple[float, ...]
    bucket_counts: list[int] = field(default_factory=list)
    count: int = 0
    total: float = 0.0
    errors: int = 0
    last_error: str | None = None

    def __post_init__(self):
        if not self.bucket_counts:
            # one slot per bound plus +Inf
            self.bucket_counts = [0] * (len(self.buckets) + 1)

    def observe(self, seconds: float) -> None:
        self.bucket_counts[bisect_left(self.buckets, seconds)] += 1
        self.count += 1
        self.total += seconds

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0

    def to_dict(self) -> dict[str, Any]:
        cumulative = 0
        histogram = {}
        for bound, n in zip(list(self.buckets) + [float("inf")], self.bucket_counts):
            cumulative += n
            histogram["+Inf" if bound == float("inf") else str(bound)] = cumulative
        return {
            "count": self.count,
            "sum": self.total,
            "mean": self.mean,
            "errors": self.errors,
            "last_error": self.last_error,
            "buckets": histogram,
        }


class MetricsRecorder:
    """
    Thread-safe observability sink.

    Implements both ObservabilitySink (for the responder layer) and
    DeviceRequestObserver (for the device client), so one instance can
    collect everything the bridge does.
    """

    def __init__(self, buckets: tuple[float, ...] = DEFAULT_BUCKETS):
        self._buckets = tuple(sorted(buckets))
        self._stats: dict[tuple[str, str], DurationStats] = {}
        self._lock = threading.Lock()

    def observe_duration(self, subsystem: str, event: str, seconds: float) -> None:
        """Record one duration observation."""
        with self._lock:
            self._get(subsystem, event).observe(seconds)
        logger.debug(f"{subsystem}.{event} took {seconds * 1000:.1f}ms")

    def record_error(self, subsystem: str, event: str, error: Exception) -> None:
        """Count an error against (subsystem, event)."""
        message = getattr(error, "technical_message", None) or str(error)
        with self._lock:
            stats = self._get(subsystem, event)
            stats.errors += 1
            stats.last_error = message
        logger.error(f"{subsystem}.{event} failed: {message}")

    def on_device_request(self, request: DeviceRequest) -> None:
        """Record a device client call under the 'client' subsystem."""
        self.observe_duration("client", request.operation, request.duration)
        if request.error is not None:
            self.record_error("client", request.operation, request.error)

    def get(self, subsystem: str, event: str) -> DurationStats | None:
        """Return the stats for a key, or None if nothing was recorded."""
        with self._lock:
            return self._stats.get((subsystem, event))

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Return all stats as plain dicts keyed by 'subsystem.event'."""
        with self._lock:
            return {f"{sub}.{event}": s.to_dict() for (sub, event), s in sorted(self._stats.items())}

    def _get(self, subsystem: str, event: str) -> DurationStats:
        key = (subsystem, event)
        stats = self._stats.get(key)
        if stats is None:
            stats = self._stats[key] = DurationStats(self._buckets)
        return stats

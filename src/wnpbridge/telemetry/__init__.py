"""Duration and error recording for bridge operations."""

from .exporter import MetricsServer, render_text
from .recorder import DEFAULT_BUCKETS, DurationStats, MetricsRecorder, ObservabilitySink

__all__ = [
    "DEFAULT_BUCKETS",
    "DurationStats",
    "MetricsRecorder",
    "MetricsServer",
    "ObservabilitySink",
    "render_text",
]

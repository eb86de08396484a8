"""
HTTP endpoint for the recorded metrics.

Endpoints:
    GET /metrics       - Prometheus text exposition format
    GET /metrics.json  - MetricsRecorder.snapshot() as JSON

Metric families follow the (subsystem, event) keys of the recorder:

    wnp_bridge_<subsystem>_update_duration_seconds{event="..."}
    wnp_bridge_<subsystem>_update_errors_total{event="..."}
    wnp_bridge_client_request_duration_seconds{operation="..."}
    wnp_bridge_client_request_errors_total{operation="..."}
"""

import http.server
import json
import logging
import socket
import threading
from collections import defaultdict

from wnpbridge.models.config import parse_listen_address
from wnpbridge.telemetry.recorder import MetricsRecorder

logger = logging.getLogger(__name__)

NAMESPACE = "wnp_bridge"
TEXT_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def _family(subsystem: str) -> tuple[str, str, str]:
    """Metric name stem, label name and help text for a subsystem."""
    if subsystem == "client":
        return f"{NAMESPACE}_client_request", "operation", "LED strip HTTP calls"
    return f"{NAMESPACE}_{subsystem}_update", "event", f"'{subsystem}' characteristic events"


def render_text(recorder: MetricsRecorder) -> str:
    """Render every recorded key in Prometheus text format."""
    families: dict[str, list[tuple[str, str, dict]]] = defaultdict(list)
    for key, stats in recorder.snapshot().items():
        subsystem, _, event = key.partition(".")
        families[subsystem].append((subsystem, event, stats))

    lines: list[str] = []
    for subsystem in sorted(families):
        stem, label, help_text = _family(subsystem)
        duration = f"{stem}_duration_seconds"
        errors = f"{stem}_errors_total"

        lines.append(f"# HELP {duration} Duration of {help_text}.")
        lines.append(f"# TYPE {duration} histogram")
        for _, event, stats in families[subsystem]:
            for bound, count in stats["buckets"].items():
                lines.append(f'{duration}_bucket{{{label}="{event}",le="{bound}"}} {count}')
            lines.append(f'{duration}_sum{{{label}="{event}"}} {stats["sum"]}')
            lines.append(f'{duration}_count{{{label}="{event}"}} {stats["count"]}')

        lines.append(f"# HELP {errors} Failed {help_text}.")
        lines.append(f"# TYPE {errors} counter")
        for _, event, stats in families[subsystem]:
            lines.append(f'{errors}{{{label}="{event}"}} {stats["errors"]}')

    return "\n".join(lines) + "\n"


class MetricsServer:
    """Serves a MetricsRecorder over HTTP on a background thread."""

    def __init__(self, recorder: MetricsRecorder, address: str):
        """
        Args:
            recorder: Source of the metrics
            address: 'host:port' to listen on (port 0 picks a free one)

        Raises:
            ValueError: If the address cannot be parsed
            OSError: If the address cannot be bound
        """
        host, port = parse_listen_address(address)
        server_cls = _IPv6Server if ":" in host else http.server.ThreadingHTTPServer
        self._server = server_cls((host, port), _make_handler(recorder))
        self._server.daemon_threads = True
        self._thread: threading.Thread | None = None

    @property
    def url(self) -> str:
        host, port = self._server.server_address[:2]
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{port}/metrics"

    def start(self) -> None:
        self._thread = threading.Thread(
            target=self._server.serve_forever, name="metrics-server", daemon=True
        )
        self._thread.start()
        logger.info(f"Serving metrics on {self.url}")

    def stop(self) -> None:
        if self._thread:
            self._server.shutdown()
            self._thread.join(timeout=5)
            self._thread = None
        self._server.server_close()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()


class _IPv6Server(http.server.ThreadingHTTPServer):
    address_family = socket.AF_INET6


def _make_handler(recorder: MetricsRecorder) -> type[http.server.BaseHTTPRequestHandler]:
    class MetricsRequestHandler(http.server.BaseHTTPRequestHandler):
        def log_message(self, format, *args):
            logger.debug(f"{self.address_string()} - {format % args}")

        def do_GET(self):
            if self.path == "/metrics":
                self._reply(TEXT_CONTENT_TYPE, render_text(recorder))
            elif self.path == "/metrics.json":
                self._reply("application/json", json.dumps(recorder.snapshot()))
            else:
                self.send_error(404)

        def _reply(self, content_type: str, body: str) -> None:
            data = body.encode("utf-8")
            self.send_response(200)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(data)))
            self.end_headers()
            self.wfile.write(data)

    return MetricsRequestHandler

"""
Reference mock of the LED strip's HTTP API, for local testing only.

Endpoints:
    GET  /states  - JSON array of packed pixel words
    GET  /size    - pixel count as plain text
    GET  /clear   - set every pixel black
    POST /raw     - replace every pixel from a JSON array

Example:
    >>> with MockDevice(pixel_count=8, port=0) as device:
    ...     url = device.url
"""

import http.server
import json
import logging
import threading

logger = logging.getLogger(__name__)


class MockDevice:
    """In-memory strip served over HTTP on a background thread."""

    def __init__(self, pixel_count: int = 8, host: str = "127.0.0.1", port: int = 8888):
        """
        Args:
            pixel_count: Number of pixels, all black initially
            host: Interface to bind
            port: TCP port (0 picks a free one)
        """
        self._states = [0] * pixel_count
        self._lock = threading.Lock()
        self._responding = threading.Event()
        self._responding.set()
        self._server = http.server.ThreadingHTTPServer((host, port), _make_handler(self))
        self._server.daemon_threads = True
        self._thread: threading.Thread | None = None

    @property
    def url(self) -> str:
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    @property
    def states(self) -> list[int]:
        with self._lock:
            return list(self._states)

    @states.setter
    def states(self, words: list[int]) -> None:
        with self._lock:
            self._states = list(words)

    def pause(self) -> None:
        """Hold every request until resume() is called, like a stalled strip."""
        self._responding.clear()

    def resume(self) -> None:
        self._responding.set()

    def start(self) -> None:
        """Serve on a daemon thread."""
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.info(f"Mock device listening on {self.url} ({len(self._states)} pixels)")

    def serve_forever(self) -> None:
        """Serve on the calling thread until interrupted."""
        logger.info(f"Mock device listening on {self.url} ({len(self._states)} pixels)")
        self._server.serve_forever()

    def stop(self) -> None:
        """Stop the background thread and release the socket."""
        self.resume()
        if self._thread:
            self._server.shutdown()
            self._thread.join(timeout=5)
            self._thread = None
        self.close()

    def close(self) -> None:
        """Release the listening socket."""
        self._server.server_close()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    # Request handling (called from server threads)

    def _clear(self) -> None:
        with self._lock:
            self._states = [0] * len(self._states)

    def _replace(self, words: list[int]) -> None:
        with self._lock:
            self._states = list(words)


def _make_handler(device: MockDevice) -> type[http.server.BaseHTTPRequestHandler]:
    class MockDeviceRequestHandler(http.server.BaseHTTPRequestHandler):
        def log_message(self, format, *args):
            logger.debug(f"{self.address_string()} - {format % args}")

        def do_GET(self):
            device._responding.wait()
            if self.path == "/states":
                logger.info("/states")
                self._reply(200, "application/json", json.dumps(device.states))
            elif self.path == "/size":
                logger.info("/size")
                self._reply(200, "text/plain", str(len(device.states)))
            elif self.path == "/clear":
                logger.info("/clear")
                device._clear()
                self._reply(200, "text/plain", "ok")
            else:
                self._reply(404, "text/plain", "not found")

        def do_POST(self):
            device._responding.wait()
            if self.path != "/raw":
                self._reply(404, "text/plain", "not found")
                return

            length = int(self.headers.get("Content-Length", 0))
            try:
                words = json.loads(self.rfile.read(length))
                if not isinstance(words, list) or not all(
                    isinstance(w, int) and not isinstance(w, bool) and 0 <= w <= 0xFFFFFFFF
                    for w in words
                ):
                    raise ValueError("expected a JSON array of uint32")
            except ValueError as e:
                logger.warning(f"/raw rejected: {e}")
                self._reply(400, "text/plain", str(e))
                return

            logger.info("/raw")
            logger.debug(f"/raw states={words}")
            device._replace(words)
            self._reply(200, "text/plain", "ok")

        def _reply(self, status: int, content_type: str, body: str) -> None:
            data = body.encode("utf-8")
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(data)))
            self.end_headers()
            self.wfile.write(data)

    return MockDeviceRequestHandler

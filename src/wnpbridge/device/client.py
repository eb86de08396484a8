"""
HTTP client for the WiFi NeoPixel strip.

The strip exposes a minimal control surface:

=======  ========  =========================  ==========================
Method   Path      Request body               Response body
=======  ========  =========================  ==========================
GET      /states   -                          JSON array of uint32
GET      /size     -                          decimal integer, plain text
GET      /clear    -                          ignored
POST     /raw      JSON array of uint32       ignored
=======  ========  =========================  ==========================

Calls are synchronous and never retried; any failure surfaces as a
TransportError to the caller. Every call is reported to registered
DeviceRequestObservers (timing/instrumentation) whether it succeeded or not.
"""

import json
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

import requests

from wnpbridge.device.observers import DeviceRequest, DeviceRequestObserver, RequestObservers
from wnpbridge.exceptions import ConfigurationError, TransportError, wrap_request_error
from wnpbridge.models.config import validate_device_url

logger = logging.getLogger(__name__)

MAX_WORD = 0xFFFFFFFF


class DeviceClient:
    """
    Blocking HTTP client for one LED strip.

    Translates the strip's JSON payloads to and from sequences of packed
    32-bit color words. Knows nothing about colors themselves; see
    `wnpbridge.codec` for that.

    Usage Example:
        ```python
        with DeviceClient("http://192.168.1.20:8888") as client:
            words = client.fetch_states()
            client.push_states([0xFFFF0000] * len(words))
        ```
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Device address, e.g. "http://192.168.1.20:8888"
            timeout: Per-request timeout in seconds (None = no timeout)
            session: Optional pre-configured requests session

        Raises:
            ConfigurationError: If base_url is not an absolute http(s) URL
        """
        try:
            self._base_url = validate_device_url(base_url)
        except (ValueError, AttributeError) as e:
            raise ConfigurationError(
                user_message=f"Malformed device address: {base_url!r}",
                technical_message=f"Cannot use {base_url!r} as device address: {e}",
                recovery_hint="Use a full URL such as http://192.168.1.20:8888",
            ) from e

        self._timeout = timeout
        self._session = session or requests.Session()
        self._observers = RequestObservers()

    @property
    def base_url(self) -> str:
        return self._base_url

    # ================================================================
    # INSTRUMENTATION
    # ================================================================

    def register_observer(self, observer: DeviceRequestObserver) -> None:
        """Register an observer for request timings."""
        self._observers.add(observer)

    def unregister_observer(self, observer: DeviceRequestObserver) -> None:
        """Unregister a request observer."""
        self._observers.remove(observer)

    # ================================================================
    # DEVICE OPERATIONS
    # ================================================================

    def fetch_states(self) -> list[int]:
        """
        Fetch the packed color word of every pixel, in pixel order.

        Raises:
            TransportError: On connection failure, non-2xx status, or malformed JSON
        """
        states = self._call("fetch_states", "GET", "/states", parse=_parse_states)
        logger.debug(f"GET /states = {states}")
        return states

    def fetch_pixel_count(self) -> int:
        """
        Fetch the number of pixels on the strip.

        Raises:
            TransportError: On transport failure or a non-integer body
        """
        return self._call("fetch_pixel_count", "GET", "/size", parse=_parse_size)

    def clear(self) -> None:
        """
        Ask the strip to set every pixel black.

        The new state is not returned; callers re-fetch it.

        Raises:
            TransportError: On transport failure or non-2xx status
        """
        body = self._call("clear", "GET", "/clear", parse=lambda r: r.text)
        logger.debug(f"clear: {body}")

    def push_states(self, words: Sequence[int]) -> None:
        """
        Replace every pixel color at once.

        Args:
            words: One packed color word per pixel

        Raises:
            TransportError: On encoding failure, transport failure, or non-2xx status
        """
        try:
            body = json.dumps([_check_word(w) for w in words])
        except (TypeError, ValueError) as e:
            raise TransportError(
                "Could not encode pixel states for the LED strip",
                operation="push_states",
                url=self._base_url + "/raw",
                original_error=str(e),
            ) from e

        logger.debug(f"POST /raw body={body}")
        reply = self._call(
            "push_states",
            "POST",
            "/raw",
            parse=lambda r: r.text,
            data=body,
            headers={"Content-Type": "application/json"},
        )
        logger.debug(f"push_states: {reply}")

    # ================================================================
    # LIFECYCLE
    # ================================================================

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        return f"DeviceClient({self._base_url!r})"

    # ================================================================
    # INTERNALS
    # ================================================================

    def _call(
        self,
        operation: str,
        method: str,
        path: str,
        parse: Callable[[requests.Response], Any],
        **kwargs: Any,
    ) -> Any:
        url = self._base_url + path
        status_code = None
        error = None
        start = time.monotonic()
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
            status_code = response.status_code
            response.raise_for_status()
            return parse(response)
        except (requests.RequestException, ValueError, TypeError) as e:
            error = wrap_request_error(e, operation, url)
            raise error from e
        finally:
            self._observers.publish(
                DeviceRequest(
                    operation=operation,
                    method=method,
                    path=path,
                    status_code=status_code,
                    duration=time.monotonic() - start,
                    error=error,
                )
            )


def _check_word(word: Any) -> int:
    if isinstance(word, bool) or not isinstance(word, int):
        raise TypeError(f"pixel word must be an int, got {type(word).__name__}")
    if not 0 <= word <= MAX_WORD:
        raise ValueError(f"pixel word {word} is outside the uint32 range")
    return word


def _parse_states(response: requests.Response) -> list[int]:
    payload = response.json()
    if not isinstance(payload, list):
        raise ValueError(f"expected a JSON array of pixel words, got {type(payload).__name__}")
    return [_check_word(w) for w in payload]


def _parse_size(response: requests.Response) -> int:
    # base 0 accepts "8" as well as "0x08"
    count = int(response.text.strip(), 0)
    if not 0 <= count <= 0x7FFFFFFF:
        raise ValueError(f"pixel count {count} out of range")
    return count

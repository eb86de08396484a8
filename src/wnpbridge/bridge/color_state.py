"""
Color state bridge between accessory controls and the LED strip.

The bridge owns two caches:

- **state**: the last known color of every pixel on the strip
- **on_state**: the colors to restore when the strip is turned back on

On/off is never stored; it is derived by scanning ``state``. The strip is
"on" when at least one pixel is non-black and "off" when every pixel is
black.

Threading:
    Every mutating operation runs under a single re-entrant lock, so
    concurrent updates from different characteristics are applied one
    after the other and never interleave their pushes. Reads of the
    cached state do not take the lock.
"""

import logging
import threading
from collections.abc import Sequence
from typing import Protocol

from wnpbridge import codec
from wnpbridge.exceptions import TransportError
from wnpbridge.models import Color

logger = logging.getLogger(__name__)


class BridgeNotInitializedError(RuntimeError):
    """An operation was attempted before initialize()."""


class BridgeAlreadyInitializedError(RuntimeError):
    """initialize() was called a second time."""


class StripClient(Protocol):
    """The device calls the bridge relies on."""

    def fetch_states(self) -> list[int]: ...

    def clear(self) -> None: ...

    def push_states(self, words: Sequence[int]) -> None: ...


def strip_is_on(state: Sequence[Color]) -> bool:
    """True if at least one pixel is lit."""
    return any(not c.is_black for c in state)


def strip_is_off(state: Sequence[Color]) -> bool:
    """True if every pixel is black (vacuously true for an empty strip)."""
    return all(c.is_black for c in state)


class ColorStateBridge:
    """
    Keeps a local model of the strip consistent with the device.

    Failure Semantics:
        Device errors (TransportError) propagate unchanged and nothing is
        retried. If a push succeeds but the follow-up fetch fails, the
        cached state is left as it was before the call and may be stale.
        A fetch that returns a different pixel count than initialize()
        saw is a TransportError too; the caches keep their length.

    Reads:
        Both caches are immutable tuples replaced whole on every commit.
        `is_on`, `is_off` and the snapshot properties read the current
        tuple without taking the lock, so they never wait behind a
        device call in progress.

    Usage Example:
        ```python
        bridge = ColorStateBridge(DeviceClient(url))
        bridge.initialize()
        bridge.set_solid(Color.from_hsv(120, 1.0, 1.0))
        bridge.turn_off()
        bridge.turn_on()   # restores the remembered on-color
        ```
    """

    def __init__(self, client: StripClient):
        """
        Initialize the bridge (no device calls are made here).

        Args:
            client: Device client used for every strip operation
        """
        self._client = client
        self._lock = threading.RLock()
        self._state: tuple[Color, ...] | None = None
        self._on_state: tuple[Color, ...] = ()

    # ================================================================
    # LIFECYCLE
    # ================================================================

    def initialize(self) -> None:
        """
        Load the strip state from the device and seed the on-color.

        If the strip is lit, its current colors become the on-color;
        otherwise the on-color defaults to solid red. The number of pixels
        read here is fixed for the life of the bridge.

        Raises:
            TransportError: If the initial fetch fails
            BridgeAlreadyInitializedError: If called more than once
        """
        with self._lock:
            if self._state is not None:
                raise BridgeAlreadyInitializedError("ColorStateBridge is already initialized")

            state = tuple(codec.decode_many(self._client.fetch_states()))
            if strip_is_on(state):
                on_state = state
            else:
                on_state = (Color.red(),) * len(state)

            self._on_state = on_state
            self._state = state
            logger.info(
                f"Bridge initialized: {len(state)} pixels, "
                f"{'on' if strip_is_on(state) else 'off'}"
            )

    @property
    def initialized(self) -> bool:
        return self._state is not None

    # ================================================================
    # STRIP OPERATIONS
    # ================================================================

    def turn_on(self) -> None:
        """
        Push the remembered on-color, then re-read the strip.

        The device is the source of truth: the re-fetched state is cached,
        and if it is lit it also becomes the new on-color.

        Raises:
            TransportError: If the push or the re-fetch fails
        """
        with self._lock:
            self._require_initialized()
            self._client.push_states(codec.encode_many(self._on_state))
            state = self._refetch()
            if strip_is_on(state):
                self._on_state = state
            self._state = state
            logger.info("Strip turned on")

    def turn_off(self) -> None:
        """
        Clear the strip, then re-read it. The on-color is kept.

        Raises:
            TransportError: If the clear or the re-fetch fails
        """
        with self._lock:
            self._require_initialized()
            self._client.clear()
            self._state = self._refetch()
            logger.info("Strip turned off")

    def set_solid(self, color: Color) -> None:
        """
        Set every pixel to one color.

        The pushed state is trusted and cached without a re-fetch. If the
        new color has a non-zero value and the strip was already on, the
        on-color becomes the state *before* this call. Caches change only
        once the push has succeeded.

        Args:
            color: Color for every pixel

        Raises:
            TransportError: If the push fails (caches unchanged)
        """
        with self._lock:
            previous = self._require_initialized()
            new_state = (color,) * len(previous)

            on_state = self._on_state
            _, _, value = color.to_hsv()
            if value > 0 and strip_is_on(previous):
                on_state = previous

            self._client.push_states(codec.encode_many(new_state))

            self._on_state = on_state
            self._state = new_state
            logger.debug(f"set_solid({color.to_hex()}) on {len(new_state)} pixels")

    def current_hsv(self) -> tuple[float, float, float]:
        """
        Re-read the strip and return the HSV of pixel 0.

        Pixel 0 stands in for the whole strip, which the accessory treats
        as one solid color. An empty strip reports (0, 0, 0).

        Raises:
            TransportError: If the fetch fails
        """
        with self._lock:
            self._require_initialized()
            state = self._refetch()
            self._state = state
            if not state:
                return (0.0, 0.0, 0.0)
            return state[0].to_hsv()

    def is_on(self) -> bool:
        """Scan the cached state; no device call and no lock."""
        return strip_is_on(self._require_initialized())

    def is_off(self) -> bool:
        """Scan the cached state; no device call and no lock."""
        return strip_is_off(self._require_initialized())

    # ================================================================
    # SNAPSHOTS
    # ================================================================

    @property
    def state(self) -> tuple[Color, ...]:
        """Snapshot of the cached strip state."""
        return self._require_initialized()

    @property
    def on_state(self) -> tuple[Color, ...]:
        """Snapshot of the remembered on-color."""
        self._require_initialized()
        return self._on_state

    @property
    def pixel_count(self) -> int:
        return len(self._require_initialized())

    # ================================================================
    # INTERNALS
    # ================================================================

    def _refetch(self) -> tuple[Color, ...]:
        expected = len(self._state)
        words = self._client.fetch_states()
        if len(words) != expected:
            raise TransportError(
                f"LED strip reported {len(words)} pixels, expected {expected}",
                operation="fetch_states",
            )
        return tuple(codec.decode_many(words))

    def _require_initialized(self) -> tuple[Color, ...]:
        state = self._state
        if state is None:
            raise BridgeNotInitializedError("ColorStateBridge.initialize() has not been called")
        return state

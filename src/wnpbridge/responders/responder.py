"""Responder that maps accessory events onto the color state bridge."""

import logging
import threading
import time
from collections.abc import Callable

from wnpbridge.bridge import ColorStateBridge
from wnpbridge.exceptions import SequenceAbortError
from wnpbridge.models import Color
from wnpbridge.responders.identify import IdentifySequence, build_identify_steps
from wnpbridge.responders.protocols import (
    BRIGHTNESS,
    HUE,
    ON,
    SATURATION,
    ColorSink,
    LightCharacteristics,
)
from wnpbridge.telemetry import ObservabilitySink

logger = logging.getLogger(__name__)

REMOTE_UPDATE = "remote_update"
REMOTE_GET = "remote_get"
IDENTIFY = "identify"


class LightResponder(ColorSink):
    """
    Translates lightbulb characteristic events into bridge calls.

    Implements ColorSink. Each handler reports how long it took to the
    observability sink, tagged by subsystem (hue, sat, val, on, acc) and
    event kind (remote_update, remote_get, identify).

    Error Handling:
        A failed device call is logged and reported to the sink; it never
        propagates back into the accessory framework.

    Threading:
        Color updates hold a responder lock while reading the three color
        characteristics and pushing the result, so near-simultaneous hue
        and brightness changes produce one consistent color each.
    """

    def __init__(
        self,
        bridge: ColorStateBridge,
        characteristics: LightCharacteristics,
        sink: ObservabilitySink,
        identify_pause: float = 0.5,
        identify_blinks: int = 4,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the responder.

        Args:
            bridge: Initialized color state bridge
            characteristics: Accessory characteristic values to read and write
            sink: Receives durations and errors
            identify_pause: Seconds between identify blink steps
            identify_blinks: Number of clear/on alternations during identify
            sleep: Delay function used by identify
            clock: Monotonic clock used for durations
        """
        self._bridge = bridge
        self._characteristics = characteristics
        self._sink = sink
        self._identify_pause = identify_pause
        self._identify_blinks = identify_blinks
        self._sleep = sleep
        self._clock = clock
        self._update_lock = threading.Lock()

    # =================================================================
    # Startup
    # =================================================================

    def sync_from_device(self) -> None:
        """
        Seed the characteristics with what the strip is showing now.

        Raises:
            TransportError: If the strip cannot be read
        """
        h, s, v = self._bridge.current_hsv()
        self._characteristics.set_value(HUE, h)
        self._characteristics.set_value(SATURATION, s * 100)
        self._characteristics.set_value(BRIGHTNESS, round(v * 100))
        self._characteristics.set_value(ON, self._bridge.is_on())
        logger.info(f"Characteristics synced from strip: hsv=({h:.1f}, {s:.2f}, {v:.2f})")

    # =================================================================
    # ColorSink Protocol
    # =================================================================

    def on_hue_changed(self, value: float) -> None:
        start = self._clock()
        logger.debug(f"Changed Hue: {value}")
        self._update_color("hue")
        self._observe("hue", REMOTE_UPDATE, start)

    def on_saturation_changed(self, value: float) -> None:
        start = self._clock()
        logger.debug(f"Changed Saturation: {value}")
        self._update_color("sat")
        self._observe("sat", REMOTE_UPDATE, start)

    def on_brightness_changed(self, value: int) -> None:
        start = self._clock()
        logger.debug(f"Changed Brightness: {value}")
        self._update_color("val")
        self._observe("val", REMOTE_UPDATE, start)

    def on_power_changed(self, on: bool) -> None:
        """
        Turn the strip on or off.

        The On characteristic is set to the requested value whether or not
        the device call succeeded.
        """
        start = self._clock()
        logger.debug(f"Changed On: {on}")
        try:
            if on:
                self._bridge.turn_on()
            else:
                self._bridge.turn_off()
        except Exception as e:
            logger.error(f"Error switching strip {'on' if on else 'off'}: {e}")
            self._sink.record_error("on", REMOTE_UPDATE, e)

        self._characteristics.set_value(ON, on)
        self._observe("on", REMOTE_UPDATE, start)

    def on_power_requested(self) -> bool:
        """Answer from the cached strip state; no device call."""
        start = self._clock()
        is_on = self._bridge.is_on()
        self._observe("on", REMOTE_GET, start)
        return is_on

    def on_identify(self) -> None:
        """
        Blink the strip so the user can spot it.

        A failing step stops the routine; the failure is logged and
        reported, not raised.
        """
        start = self._clock()
        initial_on = self._bridge.is_on()
        steps = build_identify_steps(
            initial_on, blinks=self._identify_blinks, pause=self._identify_pause
        )
        logger.info(f"Identify requested (initially {'on' if initial_on else 'off'})")

        try:
            IdentifySequence(self._bridge, sleep=self._sleep).run(steps)
        except SequenceAbortError as e:
            logger.error(f"Error during identify: {e.technical_message}")
            self._sink.record_error("acc", IDENTIFY, e)
        finally:
            self._observe("acc", IDENTIFY, start)

    # =================================================================
    # Helpers
    # =================================================================

    def _update_color(self, subsystem: str) -> None:
        # All three values are read fresh; only one of them has changed
        with self._update_lock:
            try:
                h = float(self._characteristics.get_value(HUE))
                s = float(self._characteristics.get_value(SATURATION)) / 100
                v = float(self._characteristics.get_value(BRIGHTNESS)) / 100
                logger.debug(f"updateColor hue={h} sat={s} val={v}")
                self._bridge.set_solid(Color.from_hsv(h, s, v))
            except Exception as e:
                logger.error(f"updateColor failed: {e}")
                self._sink.record_error(subsystem, REMOTE_UPDATE, e)

    def _observe(self, subsystem: str, event: str, start: float) -> None:
        self._sink.observe_duration(subsystem, event, self._clock() - start)

"""HAP-python lightbulb accessory backed by a ColorSink.

The accessory owns the HomeKit characteristics and forwards remote
events to a ColorSink. Setter callbacks are handed to the driver's
executor so blocking device I/O never runs on the accessory server's
event loop. The On getter answers from the bridge's cache.
"""

import logging
from collections.abc import Callable
from typing import Any

from pyhap.accessory import Accessory
from pyhap.accessory_driver import AccessoryDriver
from pyhap.const import CATEGORY_LIGHTBULB

from wnpbridge.models import BridgeConfig
from wnpbridge.responders.protocols import BRIGHTNESS, HUE, ON, SATURATION, ColorSink

logger = logging.getLogger(__name__)


class NeoPixelLightbulb(Accessory):
    """Colored lightbulb accessory; also the responder's LightCharacteristics."""

    category = CATEGORY_LIGHTBULB

    def __init__(
        self,
        driver: AccessoryDriver,
        display_name: str,
        serial_number: str = "0123456789",
        model: str = "a",
        manufacturer: str = "Dave Henderson",
        **kwargs: Any,
    ):
        super().__init__(driver, display_name, **kwargs)
        self.set_info_service(
            manufacturer=manufacturer, model=model, serial_number=serial_number
        )

        service = self.add_preload_service("Lightbulb", chars=[HUE, SATURATION, BRIGHTNESS])
        self._chars = {name: service.get_characteristic(name) for name in (ON, HUE, SATURATION, BRIGHTNESS)}
        self._identify = self.get_service("AccessoryInformation").get_characteristic("Identify")

    def bind(self, sink: ColorSink) -> None:
        """Route characteristic events to `sink`."""
        self._chars[HUE].setter_callback = self._dispatcher(sink.on_hue_changed)
        self._chars[SATURATION].setter_callback = self._dispatcher(sink.on_saturation_changed)
        self._chars[BRIGHTNESS].setter_callback = self._dispatcher(sink.on_brightness_changed)
        self._chars[ON].setter_callback = self._dispatcher(sink.on_power_changed)
        self._chars[ON].getter_callback = sink.on_power_requested
        self._identify.setter_callback = self._dispatcher(lambda _value: sink.on_identify())
        logger.debug(f"{self.display_name} bound to {sink}")

    # LightCharacteristics

    def get_value(self, name: str) -> Any:
        return self._chars[name].value

    def set_value(self, name: str, value: Any) -> None:
        self._chars[name].set_value(value)

    def _dispatcher(self, handler: Callable[[Any], None]) -> Callable[[Any], None]:
        def dispatch(value: Any) -> None:
            self.driver.add_job(handler, value)

        return dispatch


def create_driver(config: BridgeConfig) -> AccessoryDriver:
    """Build the accessory server from configuration."""
    config.persist_file.parent.mkdir(parents=True, exist_ok=True)
    kwargs: dict[str, Any] = {
        "port": config.port,
        "persist_file": str(config.persist_file),
        "pincode": config.pincode.encode(),
    }
    if config.address:
        kwargs["address"] = config.address
    return AccessoryDriver(**kwargs)

"""Protocols at the seam between the accessory framework and the bridge.

- ColorSink: events the framework delivers (implemented by LightResponder)
- LightCharacteristics: values the responder reads and writes back
  (implemented by the accessory adapter)
"""

from typing import Any, Protocol, runtime_checkable

# Characteristic names as the accessory framework spells them
HUE = "Hue"
SATURATION = "Saturation"
BRIGHTNESS = "Brightness"
ON = "On"


@runtime_checkable
class ColorSink(Protocol):
    """
    Receiver for remote characteristic events.

    The framework calls these from its own threads; hue, saturation and
    brightness updates may arrive concurrently.
    """

    def on_hue_changed(self, value: float) -> None:
        """Hue was changed remotely (degrees, 0-360)."""
        ...

    def on_saturation_changed(self, value: float) -> None:
        """Saturation was changed remotely (percent, 0-100)."""
        ...

    def on_brightness_changed(self, value: int) -> None:
        """Brightness was changed remotely (percent, 0-100)."""
        ...

    def on_power_changed(self, on: bool) -> None:
        """On was changed remotely."""
        ...

    def on_power_requested(self) -> bool:
        """The framework wants a fresh On value."""
        ...

    def on_identify(self) -> None:
        """The user asked the accessory to identify itself."""
        ...


@runtime_checkable
class LightCharacteristics(Protocol):
    """Current-value access to the accessory's lightbulb characteristics."""

    def get_value(self, name: str) -> Any:
        """Return the current value of characteristic `name`."""
        ...

    def set_value(self, name: str, value: Any) -> None:
        """Write `value` into characteristic `name`."""
        ...

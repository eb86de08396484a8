"""wnpbridge: HomeKit bridge for WiFi NeoPixel LED strips."""

__version__ = "0.1.0"

# Color state
from .bridge import ColorStateBridge

# Device transport
from .device import DeviceClient

__all__ = [
    "ColorStateBridge",
    "DeviceClient",
]

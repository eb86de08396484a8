"""HomeKit accessory adapter (HAP-python)."""

from .accessory import NeoPixelLightbulb, create_driver

__all__ = ["NeoPixelLightbulb", "create_driver"]

"""Data models for the NeoPixel bridge."""

from .color import Color
from .config import BridgeConfig

__all__ = [
    "BridgeConfig",
    "Color",
]

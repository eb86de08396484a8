"""Color state bridge."""

from .color_state import (
    BridgeAlreadyInitializedError,
    BridgeNotInitializedError,
    ColorStateBridge,
    StripClient,
    strip_is_off,
    strip_is_on,
)

__all__ = [
    "BridgeAlreadyInitializedError",
    "BridgeNotInitializedError",
    "ColorStateBridge",
    "StripClient",
    "strip_is_off",
    "strip_is_on",
]

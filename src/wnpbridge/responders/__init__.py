"""Responder layer: accessory events in, bridge calls out."""

from .identify import IdentifySequence, IdentifyStep, build_identify_steps
from .protocols import BRIGHTNESS, HUE, ON, SATURATION, ColorSink, LightCharacteristics
from .responder import IDENTIFY, REMOTE_GET, REMOTE_UPDATE, LightResponder

__all__ = [
    "BRIGHTNESS",
    "HUE",
    "IDENTIFY",
    "ON",
    "REMOTE_GET",
    "REMOTE_UPDATE",
    "SATURATION",
    "ColorSink",
    "IdentifySequence",
    "IdentifyStep",
    "LightCharacteristics",
    "LightResponder",
    "build_identify_steps",
]

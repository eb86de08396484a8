"""CLI commands for wnpbridge."""

from .config import config
from .device import device_group
from .mock import mock_device

__all__ = ["config", "device_group", "mock_device"]

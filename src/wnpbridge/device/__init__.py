"""LED strip device access."""

from .client import DeviceClient
from .observers import DeviceRequest, DeviceRequestObserver, RequestObservers

__all__ = ["DeviceClient", "DeviceRequest", "DeviceRequestObserver", "RequestObservers"]

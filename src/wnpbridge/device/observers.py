"""Fan-out of device request records to instrumentation."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from threading import Lock
from typing import Protocol, runtime_checkable

from wnpbridge.exceptions import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceRequest:
    """One completed (or failed) call to the strip."""

    operation: str
    method: str
    path: str
    status_code: int | None
    duration: float
    error: TransportError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@runtime_checkable
class DeviceRequestObserver(Protocol):
    """Receives a record for every device call, keyed by operation name."""

    def on_device_request(self, request: DeviceRequest) -> None:
        """
        Handle a completed device request.

        Note:
            Called on the thread that issued the request, after the
            response was read. Must not raise.
        """
        ...


class RequestObservers:
    """
    Thread-safe set of DeviceRequestObservers.

    `publish` copies the list under the lock and calls observers outside
    it. An observer that raises is logged and skipped; the device call
    that produced the record is never affected.
    """

    def __init__(self):
        self._observers: list[DeviceRequestObserver] = []
        self._lock = Lock()

    def add(self, observer: DeviceRequestObserver) -> None:
        with self._lock:
            if observer in self._observers:
                return
            self._observers.append(observer)
        logger.info(f"Registered device request observer: {observer!r}")

    def remove(self, observer: DeviceRequestObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                logger.warning(f"Unknown device request observer: {observer!r}")
                return
            self._observers.remove(observer)

    def publish(self, request: DeviceRequest) -> None:
        with self._lock:
            observers = list(self._observers)

        for observer in observers:
            try:
                observer.on_device_request(request)
            except Exception as e:
                logger.error(
                    f"Observer {observer!r} failed on {request.operation}: {e}", exc_info=True
                )

    def __iter__(self) -> Iterator[DeviceRequestObserver]:
        with self._lock:
            return iter(list(self._observers))

    def __contains__(self, observer: object) -> bool:
        with self._lock:
            return observer in self._observers

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)

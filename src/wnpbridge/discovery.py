"""mDNS lookup of the LED strip's address."""

import logging
import threading

from zeroconf import IPVersion, ServiceBrowser, ServiceListener, Zeroconf

from wnpbridge.exceptions import DiscoveryError

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_TYPE = "_neopixel._tcp.local."


class FirstDeviceListener(ServiceListener):
    """Captures the URL of the first service that resolves to an address."""

    def __init__(self, ip_version: IPVersion = IPVersion.V4Only):
        self.url: str | None = None
        self.found = threading.Event()
        self._ip_version = ip_version

    def add_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        if self.found.is_set():
            return

        info = zc.get_service_info(type_, name)
        if info is None:
            logger.debug(f"mDNS: {name} did not resolve")
            return

        addresses = info.parsed_addresses(self._ip_version)
        if not addresses:
            logger.debug(f"mDNS: {name} has no usable address")
            return

        host = addresses[0]
        if ":" in host:
            host = f"[{host}]"
        self.url = f"http://{host}:{info.port}"
        logger.info(f"Found neopixel: name={name} server={info.server} url={self.url}")
        self.found.set()

    def update_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        pass

    def remove_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        pass


def discover_device_url(
    service_type: str = DEFAULT_SERVICE_TYPE,
    timeout: float = 5.0,
    enable_ipv6: bool = False,
) -> str:
    """
    Browse mDNS and return the first matching device as a base URL.

    Args:
        service_type: Fully qualified service type to browse
        timeout: Seconds to wait for an answer
        enable_ipv6: Accept IPv6 addresses

    Returns:
        URL such as "http://192.168.1.20:8888"

    Raises:
        DiscoveryError: If nothing answers in time or mDNS cannot start
    """
    ip_version = IPVersion.All if enable_ipv6 else IPVersion.V4Only
    try:
        zc = Zeroconf(ip_version=ip_version)
    except OSError as e:
        raise DiscoveryError(service_type, timeout, original_error=str(e)) from e

    listener = FirstDeviceListener(ip_version)
    browser = ServiceBrowser(zc, service_type, listener)
    logger.debug(f"Browsing {service_type} for up to {timeout}s")
    try:
        listener.found.wait(timeout)
    finally:
        browser.cancel()
        zc.close()

    if listener.url is None:
        raise DiscoveryError(service_type, timeout)
    return listener.url

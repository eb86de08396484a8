"""
Top-level bridge application.

Wires configuration, discovery, the device client, the color state
bridge, the responder and the HomeKit accessory together:

    BridgeApp
    ├── DeviceClient  ── HTTP ──> LED strip
    ├── ColorStateBridge
    ├── LightResponder (ColorSink)
    ├── NeoPixelLightbulb (HAP-python accessory)
    ├── MetricsRecorder (durations and errors)
    └── MetricsServer (/metrics, when metrics_addr is set)

Initialization is the one fatal step: if the strip cannot be read, the
accessory is never registered.
"""

import logging
import signal

from wnpbridge.bridge import ColorStateBridge
from wnpbridge.device import DeviceClient
from wnpbridge.discovery import discover_device_url
from wnpbridge.exceptions import ErrorContext
from wnpbridge.homekit import NeoPixelLightbulb, create_driver
from wnpbridge.models import BridgeConfig
from wnpbridge.responders import LightResponder
from wnpbridge.telemetry import MetricsRecorder, MetricsServer

logger = logging.getLogger(__name__)


class BridgeApp:
    """Owns every bridge component for the lifetime of the process."""

    def __init__(self, config: BridgeConfig, recorder: MetricsRecorder | None = None):
        """
        Args:
            config: Bridge configuration
            recorder: Observability sink (a new MetricsRecorder if omitted)
        """
        self.config = config
        self.recorder = recorder or MetricsRecorder()

        self.client: DeviceClient | None = None
        self.bridge: ColorStateBridge | None = None
        self.responder: LightResponder | None = None
        self.accessory: NeoPixelLightbulb | None = None
        self.metrics_server: MetricsServer | None = None
        self._driver = None

    def resolve_device_url(self) -> str:
        """Use the configured address, or look the strip up via mDNS."""
        if self.config.host_url:
            return self.config.host_url

        logger.info(f"No device address configured, browsing {self.config.service_type}")
        return discover_device_url(
            service_type=self.config.service_type,
            timeout=self.config.discovery_timeout,
            enable_ipv6=self.config.enable_ipv6,
        )

    def initialize(self) -> ColorStateBridge:
        """
        Connect to the strip and load its state.

        Raises:
            ConfigurationError: Malformed address or discovery failure
            TransportError: The initial state could not be fetched
        """
        with ErrorContext("initialize bridge", logger_instance=logger):
            url = self.resolve_device_url()
            self.client = DeviceClient(url, timeout=self.config.request_timeout)
            self.client.register_observer(self.recorder)

            self.bridge = ColorStateBridge(self.client)
            self.bridge.initialize()

        logger.info(f"Connected to LED strip at {url}")
        return self.bridge

    def create_accessory(self, driver) -> NeoPixelLightbulb:
        """Build the accessory, seed its characteristics and bind the responder."""
        if self.bridge is None:
            raise RuntimeError("BridgeApp.initialize() must run before create_accessory()")

        accessory = NeoPixelLightbulb(driver, self.config.accessory_name)
        self.responder = LightResponder(
            self.bridge,
            accessory,
            self.recorder,
            identify_pause=self.config.identify_pause,
            identify_blinks=self.config.identify_blinks,
        )
        self.responder.sync_from_device()
        accessory.bind(self.responder)
        self.accessory = accessory
        return accessory

    def start_metrics(self) -> MetricsServer | None:
        """Serve the recorder on config.metrics_addr; does nothing if unset."""
        if not self.config.metrics_addr or self.metrics_server is not None:
            return self.metrics_server

        self.metrics_server = MetricsServer(self.recorder, self.config.metrics_addr)
        self.metrics_server.start()
        return self.metrics_server

    def run(self) -> None:
        """Initialize, register the accessory, and serve until stopped."""
        self.initialize()
        self.start_metrics()

        self._driver = create_driver(self.config)
        accessory = self.create_accessory(self._driver)
        self._driver.add_accessory(accessory=accessory)

        signal.signal(signal.SIGTERM, self._driver.signal_handler)

        logger.info(
            f"Starting accessory '{self.config.accessory_name}' "
            f"(setup code {self.config.pincode}) on port {self.config.port}"
        )
        self._driver.start()

    def shutdown(self) -> None:
        """Stop the metrics endpoint and release the device connection."""
        if self.metrics_server is not None:
            self.metrics_server.stop()
            self.metrics_server = None
        if self.client is not None:
            self.client.close()
            self.client = None
        logger.info("Bridge shut down")

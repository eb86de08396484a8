"""Bridge configuration model."""

from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError, field_serializer, field_validator

from wnpbridge.exceptions import wrap_pydantic_error
from wnpbridge.models.store import ConfigStore

DEFAULT_CONFIG_DIR = Path.home() / ".wnpbridge"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.json"


def validate_device_url(value: str) -> str:
    """Check that a device address is an absolute http(s) URL.

    Returns the URL without a trailing slash.

    Raises:
        ValueError: If the scheme or host is missing
    """
    parsed = urlparse(value.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"'{value}' is not an http(s) URL with a host")
    return value.strip().rstrip("/")


def parse_listen_address(value: str) -> tuple[str, int]:
    """Split 'host:port' into its parts; an empty host means all interfaces.

    Raises:
        ValueError: If the port is missing or out of range
    """
    host, sep, port = value.strip().rpartition(":")
    if not sep or not port.isdigit() or not 0 <= int(port) <= 65535:
        raise ValueError(f"'{value}' is not a host:port address")
    return host.strip("[]") or "0.0.0.0", int(port)


class BridgeConfig(BaseModel):
    """Bridge configuration and settings."""

    # Device
    host_url: str | None = Field(
        default=None,
        description="Base URL of the LED strip (None = discover via mDNS)",
    )
    service_type: str = Field(
        default="_neopixel._tcp.local.",
        description="mDNS service type browsed when host_url is not set",
    )
    discovery_timeout: float = Field(
        default=5.0, gt=0, description="How long to browse mDNS for the device (seconds)"
    )
    enable_ipv6: bool = Field(default=False, description="Accept IPv6 addresses from discovery")
    request_timeout: float | None = Field(
        default=None,
        gt=0,
        description="HTTP timeout for device calls in seconds (None = wait indefinitely)",
    )

    # Accessory
    accessory_name: str = Field(default="WiFi NeoPixel", description="Accessory display name")
    setup_code: str = Field(default="12344321", description="8-digit HomeKit setup code")
    port: int = Field(default=51826, ge=0, le=65535, description="Accessory server port")
    address: str | None = Field(
        default=None, description="Address the accessory server binds to (None = all)"
    )
    persist_file: Path = Field(
        default_factory=lambda: DEFAULT_CONFIG_DIR / "accessory.state",
        description="File holding accessory pairing state",
    )

    # Metrics
    metrics_addr: str | None = Field(
        default=None,
        description="host:port for the /metrics endpoint, e.g. ':8080' (None = disabled)",
    )

    # Identify routine
    identify_pause: float = Field(
        default=0.5, ge=0, description="Pause between identify blink steps (seconds)"
    )
    identify_blinks: int = Field(
        default=4, ge=1, description="Number of clear/on alternations during identify"
    )

    @field_validator("host_url")
    @classmethod
    def validate_host_url(cls, v: str | None) -> str | None:
        """Reject addresses that are not absolute http(s) URLs."""
        if v is None or not v.strip():
            return None
        return validate_device_url(v)

    @field_validator("metrics_addr")
    @classmethod
    def validate_metrics_addr(cls, v: str | None) -> str | None:
        """Accept ':8080', '127.0.0.1:8080' or '[::1]:8080'."""
        if v is None or not v.strip():
            return None
        parse_listen_address(v)
        return v.strip()

    @field_validator("setup_code")
    @classmethod
    def validate_setup_code(cls, v: str) -> str:
        """Accept '12344321' or '123-44-321'."""
        digits = v.replace("-", "")
        if len(digits) != 8 or not digits.isdigit():
            raise ValueError("Setup code must be exactly 8 digits")
        return digits

    @field_serializer("persist_file")
    def serialize_path(self, path: Path) -> str:
        """Serialize Path to string."""
        return str(path)

    @property
    def pincode(self) -> str:
        """Setup code in the XXX-XX-XXX form the accessory server expects."""
        code = self.setup_code
        return f"{code[:3]}-{code[3:5]}-{code[5:]}"

    def with_overrides(self, source: str = "command line", **overrides: Any) -> "BridgeConfig":
        """
        Return a validated copy with `overrides` applied; None values are ignored.

        Raises:
            ConfigValidationError: If an override fails validation
        """
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        try:
            return BridgeConfig.model_validate({**self.model_dump(), **changes})
        except ValidationError as e:
            raise wrap_pydantic_error(e, source) from e

    @classmethod
    def store(cls, path: Path | None = None) -> ConfigStore["BridgeConfig"]:
        """File store for the config, at ~/.wnpbridge/config.json unless `path` is given."""
        return ConfigStore(path or DEFAULT_CONFIG_PATH, cls)

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "BridgeConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.wnpbridge/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        return cls.store(path).read_or_default()

    def save(self, path: Path | None = None) -> None:
        """Save config to file, keeping the previous one as .bak."""
        self.store(path).write(self)

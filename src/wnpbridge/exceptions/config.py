"""Configuration-related exceptions.

This module defines exceptions for configuration errors:
- ConfigurationError: Base class for configuration errors
- ConfigFileInvalidError: Config file is empty or not valid JSON
- ConfigValidationError: Config values fail validation
- DiscoveryError: No device address configured and none found via mDNS
"""

from typing import Any

from .base import WNPBridgeError


class ConfigurationError(WNPBridgeError):
    """Configuration is invalid or cannot be loaded."""
    pass


class ConfigFileInvalidError(ConfigurationError):
    """Configuration file exists but cannot be parsed as JSON."""

    def __init__(self, file_path: str, parse_error: str):
        """
        Initialize config file invalid error.

        Args:
            file_path: Path to the invalid config file
            parse_error: The parser's message
        """
        lowered = parse_error.lower()
        if "empty" in lowered:
            user_msg = "Configuration file is empty"
        elif "trailing comma" in lowered:
            user_msg = "Configuration file has a trailing comma"
        else:
            user_msg = "Configuration file is not valid JSON"

        super().__init__(
            user_message=user_msg,
            technical_message=f"Cannot parse {file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=(
                f"Fix or delete {file_path}. "
                "'wnpbridge config restore' brings back the copy saved before the last change; "
                "'wnpbridge config reset --yes' writes defaults."
            ),
            details={"file": file_path},
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """A configuration value is out of range or malformed."""

    FIELD_HINTS = {
        "host_url": "The device address must look like http://192.168.1.20:8888",
        "setup_code": "The setup code must be 8 digits, optionally written 123-45-678",
        "port": "The accessory port must be between 0 and 65535",
        "metrics_addr": "The metrics address must look like :8080 or 127.0.0.1:8080",
        "identify_blinks": "The identify blink count must be at least 1",
    }

    def __init__(self, field: str, value: Any, error_msg: str, file_path: str | None = None):
        """
        Initialize config validation error.

        Args:
            field: The configuration field that failed validation
            value: The invalid value
            error_msg: Why the value is invalid
            file_path: Where the value came from (file path or "command line")
        """
        recovery = f"Update '{field}' with 'wnpbridge config set {field} VALUE'"
        if file_path:
            recovery += f"\nSource: {file_path}"
        if field in self.FIELD_HINTS:
            recovery += f"\n{self.FIELD_HINTS[field]}"

        super().__init__(
            user_message=f"Invalid configuration value for '{field}': {error_msg}",
            technical_message=f"Config validation failed for {field}={value!r}: {error_msg}",
            recoverable=True,
            recovery_hint=recovery,
            details={"field": field, "source": file_path},
        )
        self.field = field
        self.value = value
        self.file_path = file_path


class DiscoveryError(ConfigurationError):
    """No device address was configured and none answered on mDNS."""

    def __init__(self, service_type: str, timeout: float, original_error: str | None = None):
        """
        Initialize discovery error.

        Args:
            service_type: The mDNS service type that was browsed
            timeout: How long discovery waited (seconds)
            original_error: Underlying zeroconf error, if any
        """
        tech_msg = f"No {service_type} service answered within {timeout}s"
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message="NeoPixel device not found on the local network.",
            technical_message=tech_msg,
            recoverable=True,
            recovery_hint="Pass the device address explicitly with --host http://ADDRESS:PORT",
            details={"service": service_type, "timeout": timeout},
        )
        self.service_type = service_type
        self.timeout = timeout

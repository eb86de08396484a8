"""
Centralized error handling utilities.

This module provides a layered approach to error handling:

1. **Custom Exceptions** - Typed, user-friendly error classes (see base, transport, config modules)
2. **Error Context** - Preserve technical details for logging, show friendly messages to users
3. **Recovery Hints** - Tell users what to do when things fail
4. **Error Isolation** - A failed colour update must not take the bridge down

## Quick Reference

| Scenario | Use This |
|----------|----------|
| HTTP call to the strip failed | `raise wrap_request_error(e, "fetch_states", url) from e` |
| Config file syntax error | `ConfigFileInvalidError(path, "trailing comma")` |
| Config value invalid | `raise wrap_pydantic_error(e, str(path)) from e` |
| Critical section with auto-logging | `with ErrorContext("initialize bridge"): ...` |

## Architecture: The Three-Layer Model

```
┌─────────────────────────────────────┐
│  USER LAYER (CLI / accessory)       │
│  - Formats error.user_message       │
│  - Shows error.recovery_hint        │
└─────────────────────────────────────┘
                  ↑ WNPBridgeError
┌─────────────────────────────────────┐
│  APPLICATION LAYER (bridge,         │
│  responders)                        │
│  - Propagates TransportError        │
│  - Responders log and report        │
└─────────────────────────────────────┘
                  ↑ requests / ValueError
┌─────────────────────────────────────┐
│  LOW LEVEL (DeviceClient)           │
│  - Converts to TransportError       │
└─────────────────────────────────────┘
```
"""

import logging
from typing import Optional

import requests

from .base import WNPBridgeError
from .config import ConfigFileInvalidError, ConfigValidationError, ConfigurationError
from .transport import TransportError

logger = logging.getLogger(__name__)


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("initialize bridge", logger_instance=logger):
            bridge.initialize()
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True
    ):
        """
        Initialize error context.

        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to module logger)
            re_raise: Whether to re-raise exceptions
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[Exception] = None

    def __enter__(self):
        """Enter the context."""
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """
        Exit the context and handle any exceptions.

        Returns:
            True if exception should be suppressed, False otherwise
        """
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        self.error = exc_val

        if isinstance(exc_val, WNPBridgeError):
            self.logger.error(
                f"Failed to {self.operation}: {exc_val.describe()}"
            )
        else:
            self.logger.error(
                f"Failed to {self.operation}: {exc_val}",
                exc_info=True
            )

        return not self.re_raise


def wrap_request_error(error: Exception, operation: str, url: str) -> TransportError:
    """
    Convert low-level HTTP errors to a TransportError.

    Maps `requests` connection/timeout/status errors and payload decode
    errors to a TransportError with a user-friendly message.

    Args:
        error: The original exception
        operation: Device client operation name
        url: Request URL

    Returns:
        TransportError describing the failure
    """
    if isinstance(error, TransportError):
        return error

    status_code = None
    if isinstance(error, requests.HTTPError) and error.response is not None:
        status_code = error.response.status_code
        user_msg = f"LED strip rejected the request (HTTP {status_code})"
    elif isinstance(error, requests.Timeout):
        user_msg = "LED strip did not respond in time"
    elif isinstance(error, requests.ConnectionError):
        user_msg = "Could not connect to the LED strip"
    elif isinstance(error, (ValueError, TypeError)):
        # requests.JSONDecodeError lands here too
        user_msg = "LED strip returned a malformed payload"
    elif isinstance(error, requests.RequestException):
        user_msg = "Request to the LED strip failed"
    else:
        user_msg = f"Unexpected error talking to the LED strip: {type(error).__name__}"

    return TransportError(
        user_msg,
        operation=operation,
        url=url,
        status_code=status_code,
        original_error=str(error),
    )


def wrap_pydantic_error(error: Exception, file_path: str) -> ConfigurationError:
    """
    Convert Pydantic validation errors to configuration exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
            return ConfigValidationError(
                field=field,
                value=first_error.get('input', None),
                error_msg=first_error.get('msg', 'validation failed'),
                file_path=file_path
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            combined_msg = f"{len(errors)} validation errors:\n" + "\n".join(error_lines)
            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=combined_msg,
                file_path=file_path
            )

    return ConfigValidationError(
        field="unknown",
        value=None,
        error_msg=error_msg,
        file_path=file_path
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, WNPBridgeError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None

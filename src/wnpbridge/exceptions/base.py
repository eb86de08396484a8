"""Base exception class for the NeoPixel bridge.

Every bridge error carries two renderings: `user_message` for the CLI and
HomeKit-facing logs, and `technical_message` for the log file. Errors
raised at the device or discovery seam also carry `details`, a flat
mapping (operation, url, status code, ...) that handlers log alongside
the message.
"""

from typing import Any


class WNPBridgeError(Exception):
    """
    Base exception for all bridge errors.

    Attributes:
        user_message: Human-friendly message for display
        technical_message: Detailed message for logging
        recoverable: True if the bridge keeps running after this error
        recovery_hint: Optional hint for how to fix the issue
        details: Structured context for logs
    """

    def __init__(
        self,
        user_message: str,
        technical_message: str | None = None,
        recoverable: bool = False,
        recovery_hint: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint
        self.details = {k: v for k, v in (details or {}).items() if v is not None}

    def __str__(self) -> str:
        return self.user_message

    def describe(self) -> str:
        """One log line: technical message plus any details as key=value pairs."""
        if not self.details:
            return self.technical_message
        pairs = " ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.technical_message} [{pairs}]"

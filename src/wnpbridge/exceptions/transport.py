"""Device transport exceptions.

This module defines the error raised for any failed call to the LED
strip's HTTP control surface:
- TransportError: connection failure, non-2xx status, or undecodable payload
"""

from .base import WNPBridgeError


class TransportError(WNPBridgeError):
    """A device call failed on the wire or returned an unusable payload."""

    def __init__(
        self,
        user_message: str,
        operation: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        original_error: str | None = None,
    ):
        """
        Initialize transport error.

        Args:
            user_message: User-friendly error message
            operation: Device client operation that failed (e.g. "fetch_states")
            url: Request URL
            status_code: HTTP status code, if a response was received
            original_error: The underlying error message
        """
        tech_msg = user_message
        if operation:
            tech_msg = f"{operation}: {tech_msg}"
        if url:
            tech_msg += f" (url={url}"
            if status_code is not None:
                tech_msg += f", status={status_code}"
            tech_msg += ")"
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_message,
            technical_message=tech_msg,
            recoverable=True,
            recovery_hint=(
                "Check that the LED strip is powered and reachable. "
                "Run 'wnpbridge device states --host URL' to check it."
            ),
            details={"operation": operation, "url": url, "status": status_code},
        )
        self.operation = operation
        self.url = url
        self.status_code = status_code

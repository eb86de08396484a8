"""Identify sequence exceptions."""

from .base import WNPBridgeError


class SequenceAbortError(WNPBridgeError):
    """A step of the identify blink sequence failed; remaining steps were skipped."""

    def __init__(self, step_index: int, action: str, cause: Exception):
        """
        Initialize sequence abort error.

        Args:
            step_index: Zero-based index of the step that failed
            action: The action the failed step performed ("on" or "clear")
            cause: The underlying error
        """
        cause_msg = getattr(cause, "technical_message", None) or str(cause)
        super().__init__(
            user_message=f"Identify sequence aborted at step {step_index} ({action})",
            technical_message=(
                f"Identify sequence aborted at step {step_index} ({action}): {cause_msg}"
            ),
            recoverable=True,
            details={"step": step_index, "action": action},
        )
        self.step_index = step_index
        self.action = action
        self.cause = cause

"""
Custom exception hierarchy for the NeoPixel bridge.

## Exception Hierarchy

```
WNPBridgeError (base)
├── TransportError
├── SequenceAbortError
└── ConfigurationError
    ├── ConfigFileInvalidError
    ├── ConfigValidationError
    └── DiscoveryError
```

All custom exceptions inherit from `WNPBridgeError`, which provides:

- `user_message`: Human-friendly message for display to users
- `technical_message`: Detailed message for logging
- `recoverable`: Whether the error can be recovered from
- `recovery_hint`: Optional suggestion for how to fix the issue
- `details`: Structured context (operation, url, status, ...) for logs

### Example: Device unreachable

```python
from wnpbridge.exceptions import TransportError

try:
    bridge.turn_on()
except TransportError as e:
    logger.error(e.technical_message)
```

See `wnpbridge.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .base import WNPBridgeError
from .config import (
    ConfigFileInvalidError,
    ConfigurationError,
    ConfigValidationError,
    DiscoveryError,
)
from .handlers import (
    ErrorContext,
    format_error_for_display,
    wrap_pydantic_error,
    wrap_request_error,
)
from .sequence import SequenceAbortError
from .transport import TransportError

__all__ = [
    "ConfigFileInvalidError",
    "ConfigValidationError",
    # Config
    "ConfigurationError",
    "DiscoveryError",
    "ErrorContext",
    # Identify
    "SequenceAbortError",
    # Transport
    "TransportError",
    # Base
    "WNPBridgeError",
    "format_error_for_display",
    # Handlers
    "wrap_pydantic_error",
    "wrap_request_error",
]

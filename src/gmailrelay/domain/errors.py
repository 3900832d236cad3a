"""Error taxonomy for relay runs.

```text
RelayError (base)
├── ConfigurationError  -- missing settings or secrets
├── DecodeError         -- push payload is not a valid notification
├── FetchError          -- history listing failed, nothing may be advanced
├── ItemResolveError    -- one message could not be resolved, skipped
├── StorageError        -- state store read/write failed
├── WriteError          -- sink append failed
└── NotifyError         -- chat fan-out failed, logged only
```
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class; ``reason`` is a short machine-readable code."""

    reason: str = "RelayError"

    def __init__(self, message: str = "", reason: str | None = None) -> None:
        super().__init__(message or self.reason)
        if reason is not None:
            self.reason = reason


class ConfigurationError(RelayError):
    reason = "Misconfigured"


class DecodeError(RelayError):
    reason = "InvalidPayload"


class FetchError(RelayError):
    reason = "ListingFailed"


class ItemResolveError(RelayError):
    reason = "ItemUnavailable"

    def __init__(self, message_id: str, message: str = "") -> None:
        super().__init__(message or f"Could not resolve message {message_id}")
        self.message_id = message_id


class StorageError(RelayError):
    reason = "StorageFailed"


class WriteError(RelayError):
    reason = "WriteFailed"


class NotifyError(RelayError):
    reason = "NotifyFailed"

"""Gmail push-notification relay with incremental history sync."""

__version__ = "0.1.0"

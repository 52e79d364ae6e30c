"""
Domain-specific exception hierarchy for the slot engine.
"""


class SlotEngineError(Exception):
    """Base class for all application-level errors."""


class InvalidQueryError(SlotEngineError, ValueError):
    """Raised when an availability query violates its contract."""


class StoreError(SlotEngineError):
    """Raised when booking data cannot be fetched or parsed."""


class ConfigError(SlotEngineError, ValueError):
    """Raised when the configuration file is invalid."""

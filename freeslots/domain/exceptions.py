"""
Domain-specific exception hierarchy for the free slots engine.
"""


class FreeSlotsError(Exception):
    """Base class for all engine-level errors."""


class ConfigurationError(FreeSlotsError, ValueError):
    """Raised when a policy or request is not usable as configured."""


class StoreError(FreeSlotsError):
    """Raised when occupied intervals cannot be read from or written to the store."""


class SeriesConflictError(FreeSlotsError):
    """Raised when the first occurrence of a series is already occupied."""

"""
Adapters layer - Booking store implementations.
"""

from .json_store import JsonIntervalStore
from .memory_store import InMemoryIntervalStore

__all__ = ["InMemoryIntervalStore", "JsonIntervalStore"]

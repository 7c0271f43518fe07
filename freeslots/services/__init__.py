"""
Service layer helpers that orchestrate the store and domain logic.
"""

from .free_slots import FreeSlotsService, IntervalReaderProtocol, IntervalWriterProtocol
from .series_booking import IntervalStoreProtocol, SeriesMaterializer

__all__ = [
    "FreeSlotsService",
    "IntervalReaderProtocol",
    "IntervalStoreProtocol",
    "IntervalWriterProtocol",
    "SeriesMaterializer",
]

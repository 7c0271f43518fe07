"""
Availability and recurrence engine for bookable resources.
"""

__version__ = "0.1.0"

"""
Core utility functions for the stock consultant backend.
"""

from .date_utils import lookback_date_range, utcfromtimestamp, utcnow

__all__ = [
    "lookback_date_range",
    "utcfromtimestamp",
    "utcnow",
]

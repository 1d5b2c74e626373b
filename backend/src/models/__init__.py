"""
Pydantic models for MongoDB collections.
Provides type safety and validation for database reads.
"""

from .user import User
from .watchlist import WatchlistItem

__all__ = [
    "User",
    "WatchlistItem",
]

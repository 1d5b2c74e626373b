"""
Repository layer for MongoDB data access.
Provides clean abstraction over database operations.
"""

from .user_repository import UserRepository
from .watchlist_repository import WatchlistRepository

__all__ = [
    "UserRepository",
    "WatchlistRepository",
]

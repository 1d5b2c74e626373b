"""
Watchlist repository for reading watched stocks.
The host application owns writes; the agent only queries.
"""

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection

from ...models.watchlist import WatchlistItem

logger = structlog.get_logger()


class WatchlistRepository:
    """Repository for watchlist data access operations."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize watchlist repository.

        Args:
            collection: MongoDB collection for watchlist items
        """
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """
        Create indexes for the agent's lookups.
        Called during application startup.
        """
        await self.collection.create_index(
            [("user_id", 1), ("added_at", -1)], name="idx_user_added_at"
        )

        logger.info("Watchlist indexes ensured")

    async def get_by_user(self, user_id: str) -> list[WatchlistItem]:
        """
        Get all watchlist items for a user.

        Args:
            user_id: User identifier

        Returns:
            List of watchlist items sorted by added_at descending
        """
        cursor = self.collection.find({"user_id": user_id}).sort(
            "added_at", -1
        )  # Newest first

        items = []
        async for item_dict in cursor:
            # Remove MongoDB _id field
            item_dict.pop("_id", None)
            items.append(WatchlistItem(**item_dict))

        return items

    async def get_symbols_by_user(self, user_id: str) -> list[str]:
        """
        Get only the symbols in a user's watchlist.

        Args:
            user_id: User identifier

        Returns:
            Symbols in storage order
        """
        cursor = self.collection.find({"user_id": user_id}, {"symbol": 1})

        symbols = []
        async for item_dict in cursor:
            symbol = item_dict.get("symbol")
            if symbol:
                symbols.append(str(symbol))

        return symbols

"""
Watchlist lookups that span more than one collection.
"""

import structlog

from ..database.repositories.user_repository import UserRepository
from ..database.repositories.watchlist_repository import WatchlistRepository

logger = structlog.get_logger()


class WatchlistService:
    """Resolves watchlists from account identifiers other than the user id."""

    def __init__(
        self, watchlist_repo: WatchlistRepository, user_repo: UserRepository
    ):
        self.watchlist_repo = watchlist_repo
        self.user_repo = user_repo

    async def get_symbols_by_email(self, email: str) -> list[str]:
        """
        Get the watchlist symbols of the account registered under ``email``.

        Args:
            email: Account email address

        Returns:
            Symbols in the user's watchlist, or [] when no account matches
        """
        user = await self.user_repo.get_by_email(email)
        if user is None:
            logger.info("No user for email; empty watchlist")
            return []

        symbols = await self.watchlist_repo.get_symbols_by_user(user.user_id)

        logger.info(
            "Watchlist symbols resolved by email",
            user_id=user.user_id,
            count=len(symbols),
        )

        return symbols

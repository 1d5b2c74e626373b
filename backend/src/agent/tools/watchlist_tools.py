"""
Watchlist lookup tool.

Two lookup paths: by user id straight against the watchlist collection
(newest first, full items), or by account email through WatchlistService
(symbols only).
"""

import structlog
from pydantic import BaseModel, ConfigDict, Field

from ...database.repositories.watchlist_repository import WatchlistRepository
from ...services.watchlist_service import WatchlistService
from .base import AgentTool, tool_failure, tool_success

logger = structlog.get_logger()


class WatchlistLookupInput(BaseModel):
    """Arguments for get_user_watchlist."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(
        None, alias="userId", description="User ID to get watchlist for"
    )
    email: str | None = Field(
        None,
        description="User email to get watchlist for (alternative to userId)",
    )


def create_watchlist_tools(
    watchlist_repo: WatchlistRepository, watchlist_service: WatchlistService
) -> list[AgentTool]:
    """
    Create the watchlist lookup tool.

    Args:
        watchlist_repo: Repository for direct user-id lookups
        watchlist_service: Service resolving an email to a watchlist

    Returns:
        List containing the get_user_watchlist tool
    """

    async def get_user_watchlist(params: WatchlistLookupInput) -> dict:
        try:
            if params.email:
                symbols = await watchlist_service.get_symbols_by_email(params.email)
                return tool_success(
                    f"Found {len(symbols)} symbols in watchlist: {', '.join(symbols)}",
                    symbols=symbols,
                )

            if params.user_id:
                items = await watchlist_repo.get_by_user(params.user_id)
                # userId, symbol, company, addedAt
                watchlist = [
                    item.model_dump(mode="json", by_alias=True) for item in items
                ]
                return tool_success(
                    f"Retrieved {len(watchlist)} items from user's watchlist",
                    watchlist=watchlist,
                )

            return tool_failure(
                "No user identification provided",
                "Failed to retrieve watchlist - no user ID or email provided",
            )

        except Exception as e:
            logger.error(
                "Watchlist tool failed",
                user_id=params.user_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return tool_failure(e, "Failed to retrieve watchlist")

    return [
        AgentTool(
            name="get_user_watchlist",
            description=(
                "Get the current user's stock watchlist. "
                "Requires userId or email to identify the user."
            ),
            input_model=WatchlistLookupInput,
            handler=get_user_watchlist,
        )
    ]

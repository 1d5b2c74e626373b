"""
Watchlist models for tracking symbols a user follows.

One document per (user, symbol) pair in the watchlist collection.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.utils.date_utils import utcnow


class WatchlistItem(BaseModel):
    """
    Watchlist item for a stock symbol.

    Read-only view of the watchlist collection as the agent needs it.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "u1",
                "symbol": "AAPL",
                "company": "Apple Inc",
                "added_at": "2025-11-01T10:00:00Z",
            }
        }
    )

    # Foreign keys
    user_id: str = Field(
        ..., serialization_alias="userId", description="User who owns this watchlist item"
    )

    # Stock details
    symbol: str = Field(..., description="Stock symbol (e.g., AAPL)")
    company: str = Field("", description="Company name shown in the watchlist")

    # Timestamps
    added_at: datetime = Field(
        default_factory=utcnow,
        serialization_alias="addedAt",
        description="When symbol was added to watchlist",
    )

    @field_validator("user_id", "symbol", mode="before")
    @classmethod
    def _coerce_to_str(cls, value: object) -> str:
        # Stored ids may be ObjectIds
        return str(value)

    @field_validator("company", mode="before")
    @classmethod
    def _default_company(cls, value: object) -> str:
        return str(value or "")

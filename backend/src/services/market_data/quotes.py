"""
Stock quote and company profile methods for Finnhub service.
"""

from typing import Any

import structlog

from ...core.utils.date_utils import utcfromtimestamp
from .base import FinnhubBase

logger = structlog.get_logger()


class QuotesMixin(FinnhubBase):
    """Methods for current quotes and company profiles."""

    async def get_quote(self, symbol: str) -> dict[str, Any] | None:
        """
        Get current price data for one symbol via Finnhub /quote.

        Args:
            symbol: Ticker symbol, already normalized by the caller

        Returns:
            Quote dict, or None when Finnhub has no data for the symbol
        """
        data = await self._get("/quote", {"symbol": symbol})

        # Finnhub answers unknown symbols with an all-zero payload
        if not data or (not data.get("c") and not data.get("t")):
            logger.info("No quote data", symbol=symbol)
            return None

        timestamp = data.get("t")
        quote = {
            "symbol": symbol,
            "current_price": data.get("c"),
            "change": data.get("d"),
            "change_percent": data.get("dp"),
            "high": data.get("h"),
            "low": data.get("l"),
            "open": data.get("o"),
            "previous_close": data.get("pc"),
            "timestamp": utcfromtimestamp(timestamp).isoformat() if timestamp else None,
        }

        logger.info("Stock quote fetched", symbol=symbol, price=quote["current_price"])

        return quote

    async def get_profile(self, symbol: str) -> dict[str, Any] | None:
        """
        Get company descriptive data via Finnhub /stock/profile2.

        Args:
            symbol: Ticker symbol, already normalized by the caller

        Returns:
            Profile dict, or None when the symbol is unknown
        """
        data = await self._get("/stock/profile2", {"symbol": symbol})

        if not data:
            logger.info("No company profile", symbol=symbol)
            return None

        profile = {
            "symbol": data.get("ticker") or symbol,
            "name": data.get("name"),
            "exchange": data.get("exchange"),
            "industry": data.get("finnhubIndustry"),
            "country": data.get("country"),
            "currency": data.get("currency"),
            "ipo": data.get("ipo"),
            # Finnhub reports market cap and shares in millions
            "market_capitalization": data.get("marketCapitalization"),
            "share_outstanding": data.get("shareOutstanding"),
            "website": data.get("weburl"),
            "logo": data.get("logo"),
        }

        logger.info("Company profile fetched", symbol=symbol, name=profile["name"])

        return profile

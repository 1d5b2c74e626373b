"""
Market data tools: company profile, stock quote, and market news.

All three read from FinnhubMarketDataService. Symbols arrive already
uppercased by the input models.
"""

import structlog
from pydantic import BaseModel, Field

from ...services.market_data import FinnhubMarketDataService
from .base import AgentTool, Symbol, tool_failure, tool_success

logger = structlog.get_logger()


class SymbolInput(BaseModel):
    """Arguments for single-symbol tools."""

    symbol: Symbol = Field(..., description="Stock symbol (e.g., AAPL, TSLA)")


class MarketNewsInput(BaseModel):
    """Arguments for get_market_news."""

    symbols: list[Symbol] | None = Field(
        None, description="Array of stock symbols to get news for (optional)"
    )


def create_market_tools(service: FinnhubMarketDataService) -> list[AgentTool]:
    """
    Create profile, quote, and news tools.

    Args:
        service: Initialized FinnhubMarketDataService instance

    Returns:
        List of market data tools
    """

    async def get_stock_profile(params: SymbolInput) -> dict:
        symbol = params.symbol
        try:
            profile = await service.get_profile(symbol)
            return tool_success(
                f"Retrieved profile for {symbol}"
                if profile
                else f"No profile found for {symbol}",
                profile=profile,
            )
        except Exception as e:
            logger.error("Stock profile tool failed", symbol=symbol, error=str(e))
            return tool_failure(e, f"Failed to get profile for {symbol}")

    async def get_stock_quote(params: SymbolInput) -> dict:
        symbol = params.symbol
        try:
            quote = await service.get_quote(symbol)
            return tool_success(
                f"Retrieved quote for {symbol}"
                if quote
                else f"No quote found for {symbol}",
                quote=quote,
            )
        except Exception as e:
            logger.error("Stock quote tool failed", symbol=symbol, error=str(e))
            return tool_failure(e, f"Failed to get quote for {symbol}")

    async def get_market_news(params: MarketNewsInput) -> dict:
        symbols = params.symbols or None
        try:
            news = await service.get_news(symbols)
            suffix = f" for symbols: {', '.join(symbols)}" if symbols else ""
            return tool_success(
                f"Retrieved {len(news)} news articles{suffix}", news=news
            )
        except Exception as e:
            logger.error("Market news tool failed", symbols=symbols, error=str(e))
            return tool_failure(e, "Failed to retrieve market news")

    return [
        AgentTool(
            name="get_stock_profile",
            description=(
                "Get detailed company profile information for a stock symbol "
                "including company name, industry, market cap, etc."
            ),
            input_model=SymbolInput,
            handler=get_stock_profile,
        ),
        AgentTool(
            name="get_stock_quote",
            description=(
                "Get current stock price, change, and other quote data "
                "for a stock symbol"
            ),
            input_model=SymbolInput,
            handler=get_stock_quote,
        ),
        AgentTool(
            name="get_market_news",
            description=(
                "Get latest market news. Can filter by specific stock symbols "
                "or get general market news."
            ),
            input_model=MarketNewsInput,
            handler=get_market_news,
        ),
    ]

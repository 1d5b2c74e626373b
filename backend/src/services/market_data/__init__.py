"""
Finnhub market data service.
Provides company profiles, quotes, and market news using the Finnhub REST API.

This module is organized into the following components:
- base: Initialization, HTTP client, and sanitization utilities
- quotes: Current quotes and company profiles
- news: General and company news
"""

from .base import FinnhubBase
from .news import (
    DEFAULT_MAX_ARTICLES,
    NewsMixin,
    format_article,
    is_valid_article,
)
from .quotes import QuotesMixin


class FinnhubMarketDataService(QuotesMixin, NewsMixin):
    """
    Finnhub market data service combining all mixins.

    Every method issues its own request and holds no per-call state, so tools
    may call it concurrently.
    """


__all__ = [
    "DEFAULT_MAX_ARTICLES",
    "FinnhubBase",
    "FinnhubMarketDataService",
    "format_article",
    "is_valid_article",
]

"""
Market news methods for Finnhub service.

Symbol news is gathered round-robin so every requested symbol gets coverage
before any symbol gets a second article.
"""

import asyncio
from typing import Any

import structlog

from ...core.utils.date_utils import lookback_date_range
from .base import FinnhubBase

logger = structlog.get_logger()

DEFAULT_MAX_ARTICLES = 6
COMPANY_NEWS_LOOKBACK_DAYS = 5


def is_valid_article(article: dict[str, Any]) -> bool:
    """Check an article has the fields the agent shows to the user."""
    return bool(
        article.get("headline")
        and article.get("summary")
        and article.get("url")
        and article.get("datetime")
    )


def format_article(
    article: dict[str, Any], category: str, symbol: str | None = None
) -> dict[str, Any]:
    """Normalize a raw Finnhub article into the shape returned to the model."""
    return {
        "id": article.get("id"),
        "headline": str(article.get("headline", "")).strip(),
        "summary": str(article.get("summary", "")).strip(),
        "source": article.get("source") or "Finnhub",
        "url": article.get("url"),
        "datetime": article.get("datetime"),
        "image": article.get("image") or "",
        "related": symbol or article.get("related") or "",
        "category": category,
    }


class NewsMixin(FinnhubBase):
    """Methods for general and company news."""

    async def get_company_news(self, symbol: str) -> list[dict[str, Any]]:
        """
        Get raw company news for the last few days.

        Args:
            symbol: Ticker symbol

        Returns:
            Raw Finnhub article list
        """
        start, end = lookback_date_range(COMPANY_NEWS_LOOKBACK_DAYS)
        data = await self._get(
            "/company-news", {"symbol": symbol, "from": start, "to": end}
        )
        return data if isinstance(data, list) else []

    async def get_general_news(self) -> list[dict[str, Any]]:
        """Get raw general market news."""
        data = await self._get("/news", {"category": "general"})
        return data if isinstance(data, list) else []

    async def get_news(
        self,
        symbols: list[str] | None = None,
        max_articles: int = DEFAULT_MAX_ARTICLES,
    ) -> list[dict[str, Any]]:
        """
        Get up to ``max_articles`` news articles.

        With symbols: company news, one article per symbol per round, newest
        first. Without symbols, or when no symbol has usable news: general
        market news de-duplicated by id, url and headline.

        Args:
            symbols: Ticker symbols, already normalized by the caller
            max_articles: Maximum number of articles to return

        Returns:
            Normalized article dicts
        """
        clean_symbols = list(dict.fromkeys(s for s in symbols or [] if s))

        if clean_symbols:
            articles = await self._get_round_robin_news(clean_symbols, max_articles)
            if articles:
                return articles
            logger.info(
                "No company news found, falling back to general news",
                symbols=clean_symbols,
            )

        general = await self.get_general_news()

        seen: set[str] = set()
        articles = []
        for article in general:
            if not is_valid_article(article):
                continue
            key = f"{article.get('id')}-{article.get('url')}-{article.get('headline')}"
            if key in seen:
                continue
            seen.add(key)
            articles.append(format_article(article, category="general"))
            if len(articles) >= max_articles:
                break

        logger.info("General news fetched", count=len(articles))

        return articles

    async def _get_round_robin_news(
        self, symbols: list[str], max_articles: int
    ) -> list[dict[str, Any]]:
        async def fetch(symbol: str) -> list[dict[str, Any]]:
            try:
                return [a for a in await self.get_company_news(symbol) if is_valid_article(a)]
            except Exception as e:
                logger.warning(
                    "Company news fetch failed", symbol=symbol, error=str(e)
                )
                return []

        per_symbol = await asyncio.gather(*(fetch(s) for s in symbols))

        # Pick the newest unused article per symbol, cycling through symbols
        for article_list in per_symbol:
            article_list.sort(key=lambda a: a.get("datetime") or 0, reverse=True)

        collected: list[dict[str, Any]] = []
        round_index = 0
        while len(collected) < max_articles and any(
            round_index < len(article_list) for article_list in per_symbol
        ):
            for symbol, article_list in zip(symbols, per_symbol):
                if round_index < len(article_list) and len(collected) < max_articles:
                    collected.append(
                        format_article(article_list[round_index], "company", symbol)
                    )
            round_index += 1

        collected.sort(key=lambda a: a.get("datetime") or 0, reverse=True)

        logger.info(
            "Company news fetched", symbols=symbols, count=len(collected)
        )

        return collected

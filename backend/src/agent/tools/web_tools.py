"""
Web content tools backed by Firecrawl.

- web_scrape: one page, truncated to WEB_CONTENT_MAX_CHARS
- financial_analysis: the first ANALYSIS_SITE_LIMIT of the canonical
  analysis sites, each truncated to ANALYSIS_CONTENT_MAX_CHARS; a site that
  fails is left out of the results
"""

from urllib.parse import quote, urlparse

import structlog
from pydantic import BaseModel, Field, HttpUrl

from ...core.exceptions import ConfigurationError
from ...services.firecrawl_service import FirecrawlService
from .base import AgentTool, Symbol, tool_failure, tool_success

logger = structlog.get_logger()

WEB_CONTENT_MAX_CHARS = 5000
ANALYSIS_CONTENT_MAX_CHARS = 2000
# Sites fetched per call; keeps Firecrawl usage within rate limits
ANALYSIS_SITE_LIMIT = 2

ANALYSIS_SITE_TEMPLATES = (
    "https://finance.yahoo.com/quote/{target}",
    "https://www.marketwatch.com/investing/stock/{target}",
    "https://seekingalpha.com/symbol/{target}",
)


def analysis_urls(target: str) -> list[str]:
    """Canonical analysis pages for a ticker or topic, in priority order."""
    encoded = quote(target, safe="")
    return [template.format(target=encoded) for template in ANALYSIS_SITE_TEMPLATES]


class WebScrapeInput(BaseModel):
    """Arguments for web_scrape."""

    url: HttpUrl = Field(..., description="URL to scrape content from")


class FinancialAnalysisInput(BaseModel):
    """Arguments for financial_analysis."""

    query: str = Field(
        ..., min_length=1, description="Search query or topic for financial analysis"
    )
    symbol: Symbol | None = Field(None, description="Specific stock symbol to analyze")


def create_web_tools(firecrawl: FirecrawlService) -> list[AgentTool]:
    """
    Create web scraping and financial analysis tools.

    Args:
        firecrawl: Initialized FirecrawlService instance

    Returns:
        List of web content tools
    """

    async def web_scrape(params: WebScrapeInput) -> dict:
        url = str(params.url)
        try:
            content = await firecrawl.scrape(url)
            return tool_success(
                f"Successfully scraped content from {url}",
                content=content[:WEB_CONTENT_MAX_CHARS],
                url=url,
            )
        except Exception as e:
            logger.error("Web scrape tool failed", url=url, error=str(e))
            return tool_failure(e, f"Failed to scrape content from {url}")

    async def financial_analysis(params: FinancialAnalysisInput) -> dict:
        target = params.symbol or params.query
        try:
            results = []
            for url in analysis_urls(target)[:ANALYSIS_SITE_LIMIT]:
                try:
                    content = await firecrawl.scrape(url)
                except ConfigurationError:
                    raise
                except Exception as e:
                    logger.warning(
                        "Analysis site fetch failed", url=url, error=str(e)
                    )
                    continue

                if content:
                    results.append(
                        {
                            "url": url,
                            "content": content[:ANALYSIS_CONTENT_MAX_CHARS],
                            "source": urlparse(url).hostname,
                        }
                    )

            return tool_success(
                f"Found {len(results)} financial analysis sources for {target}",
                results=results,
                query=params.query,
                symbol=params.symbol,
            )
        except Exception as e:
            logger.error("Financial analysis tool failed", target=target, error=str(e))
            return tool_failure(e, f"Failed to get financial analysis for {target}")

    return [
        AgentTool(
            name="web_scrape",
            description=(
                "Scrape web content from URLs. Useful for getting financial news, "
                "analysis, and market data from external sources."
            ),
            input_model=WebScrapeInput,
            handler=web_scrape,
        ),
        AgentTool(
            name="financial_analysis",
            description=(
                "Search and scrape financial analysis websites for detailed "
                "information about stocks, market trends, and investment insights."
            ),
            input_model=FinancialAnalysisInput,
            handler=financial_analysis,
        ),
    ]

"""
Firecrawl content service.

Fetches a web page through the Firecrawl scrape API and returns it as
markdown (or HTML when markdown is unavailable).
"""

import httpx
import structlog

from ..core.config import Settings
from ..core.exceptions import ConfigurationError, ExternalServiceError

logger = structlog.get_logger()


class FirecrawlService:
    """Client for the Firecrawl ``/scrape`` endpoint."""

    SERVICE_NAME = "firecrawl"

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        """
        Initialize Firecrawl client.

        Args:
            settings: Application settings with the Firecrawl API key
            client: Optional pre-built HTTP client (tests inject a mock)
        """
        self.api_key = settings.firecrawl_api_key
        self.base_url = settings.firecrawl_base_url.rstrip("/")
        # Page rendering on Firecrawl's side is slow; allow a generous timeout
        self.client = client or httpx.AsyncClient(timeout=60.0)

        logger.info(
            "Firecrawl service initialized", api_key_configured=bool(self.api_key)
        )

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()

    async def scrape(self, url: str) -> str:
        """
        Scrape one URL and return its textual content.

        Args:
            url: Page to fetch

        Returns:
            Markdown content, falling back to HTML, or "" when the page is empty

        Raises:
            ConfigurationError: If no API key is configured
            ExternalServiceError: If the request fails or Firecrawl reports failure
        """
        if not self.api_key:
            raise ConfigurationError(
                "Firecrawl API key not configured", service=self.SERVICE_NAME
            )

        try:
            response = await self.client.post(
                f"{self.base_url}/scrape",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={"url": url, "formats": ["markdown"]},
            )
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                f"Firecrawl request failed: {str(e)}",
                service=self.SERVICE_NAME,
                url=url,
            ) from e

        if response.status_code != 200:
            raise ExternalServiceError(
                f"Firecrawl API error: {response.status_code} - {response.text[:200]}",
                service=self.SERVICE_NAME,
                url=url,
                status=response.status_code,
            )

        payload = response.json()
        if not payload.get("success"):
            raise ExternalServiceError(
                "Failed to scrape URL",
                service=self.SERVICE_NAME,
                url=url,
                detail=payload.get("error"),
            )

        data = payload.get("data") or {}
        content = data.get("markdown") or data.get("html") or ""

        logger.info("Page scraped", url=url, content_length=len(content))

        return content

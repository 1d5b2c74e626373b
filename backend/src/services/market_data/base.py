"""
Base class for Finnhub market data service.
Provides initialization, HTTP client management, and sanitization utilities.
"""

import re
from typing import Any

import httpx
import structlog

from ...core.config import Settings
from ...core.exceptions import ConfigurationError, ExternalServiceError

logger = structlog.get_logger()


class FinnhubBase:
    """
    Base class for Finnhub API interactions.

    Provides:
    - HTTP client with connection pooling
    - API key management (checked per request, not at startup)
    - Response sanitization (removes API token from logs and errors)
    - Resource cleanup
    """

    SERVICE_NAME = "finnhub"

    # Class-level compiled regex pattern for token sanitization
    _TOKEN_PATTERN = re.compile(r"(token=)[^&\s\"']+", flags=re.IGNORECASE)

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        """Initialize service with Finnhub API key and persistent HTTP client.

        Args:
            settings: Application settings with API keys
            client: Optional pre-built HTTP client (tests inject a mock transport)
        """
        self.settings = settings
        self.api_key = settings.finnhub_api_key
        self.base_url = settings.finnhub_base_url.rstrip("/")

        # Persistent HTTP client with connection pooling
        self.client = client or httpx.AsyncClient(
            timeout=15.0,
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0,
            ),
        )

        if not self.api_key:
            logger.warning("Finnhub API key not configured")

        logger.info(
            "Finnhub market data service initialized",
            api_key_configured=bool(self.api_key),
        )

    async def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        await self.client.aclose()
        logger.info("Finnhub market data service closed")

    def _sanitize_text(self, text: str) -> str:
        """Remove API token from text strings before logging or raising exceptions."""
        return self._TOKEN_PATTERN.sub(r"\1****", text)

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        Issue one GET request against the Finnhub REST API.

        Args:
            path: Endpoint path (e.g., "/quote")
            params: Query parameters without the token

        Returns:
            Decoded JSON body

        Raises:
            ConfigurationError: If no API key is configured
            ExternalServiceError: On transport errors or non-200 responses
        """
        if not self.api_key:
            raise ConfigurationError(
                "Finnhub API key not configured", service=self.SERVICE_NAME
            )

        query = {**(params or {}), "token": self.api_key}

        try:
            response = await self.client.get(f"{self.base_url}{path}", params=query)
        except httpx.HTTPError as e:
            message = self._sanitize_text(str(e))
            logger.error(
                "Finnhub request failed",
                path=path,
                error=message,
                error_type=type(e).__name__,
            )
            raise ExternalServiceError(
                f"Finnhub request failed: {message}",
                service=self.SERVICE_NAME,
                path=path,
            ) from e

        if response.status_code != 200:
            sanitized_text = self._sanitize_text(response.text)
            raise ExternalServiceError(
                f"Finnhub API error: {response.status_code} - {sanitized_text[:200]}",
                service=self.SERVICE_NAME,
                path=path,
                status=response.status_code,
            )

        return response.json()

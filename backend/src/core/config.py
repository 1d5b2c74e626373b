"""
Application configuration using Pydantic Settings.
Following Factor 1: Own Your Configuration.

Supports hierarchical environment configuration:
- .env.base: Common non-secret defaults (committed to git)
- .env.{ENVIRONMENT}: Environment-specific overrides (gitignored)
- Environment variables: Highest priority

Tool credentials (Finnhub, Firecrawl) are optional: a missing key fails only
the tool call that needs it, never application startup.
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Get environment from env var, default to development
ENV = os.getenv("ENVIRONMENT", "development")


class Settings(BaseSettings):
    """Application settings with hierarchical env file support."""

    model_config = SettingsConfigDict(
        # Load base first, then environment-specific override
        env_file=[
            ".env.base",  # Common defaults (committed)
            f".env.{ENV}",  # Environment overrides (gitignored)
        ],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "test", "production"] = "development"

    # Database connections
    mongodb_url: str = "mongodb://localhost:27017/stock_consultant"
    watchlist_collection: str = "watchlists"
    users_collection: str = "user"

    # HTTP surface
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # External APIs - LLM (Alibaba Cloud DashScope)
    dashscope_api_key: str = ""
    default_llm_model: str = "qwen-plus-latest"
    default_llm_temperature: float = 0.1  # Low temperature for factual answers
    llm_request_timeout: float = 30.0  # Per model call, in seconds

    # External APIs - Market data & content
    finnhub_api_key: str = ""
    finnhub_base_url: str = "https://finnhub.io/api/v1"
    firecrawl_api_key: str = ""
    firecrawl_base_url: str = "https://api.firecrawl.dev/v1"

    # Agent loop
    tool_timeout_seconds: float = 30.0  # Per tool call, inside one TOOLS batch
    agent_max_iterations: int | None = None  # None = loop until the model stops

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()

"""
Health check endpoints for monitoring and connectivity verification.
Following Factor 9: Error Handling and observability.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request

from ..core.config import Settings, get_settings
from ..database.mongodb import MongoDB

logger = structlog.get_logger()

router = APIRouter()


def get_mongodb(request: Request) -> MongoDB:
    """Dependency to get MongoDB instance from app state."""
    mongodb: MongoDB = request.app.state.mongodb
    return mongodb


@router.get("/health")
async def health_check(
    mongodb: MongoDB = Depends(get_mongodb),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """
    Health check endpoint.

    Reports MongoDB connectivity and which external services are configured.
    A missing tool credential degrades that tool only, so it does not make
    the service unhealthy.
    """
    logger.info("Health check requested")

    mongodb_status = await mongodb.health_check()

    return {
        "status": "ok" if mongodb_status.get("connected", False) else "degraded",
        "environment": settings.environment,
        "dependencies": {"mongodb": mongodb_status},
        "configuration": {
            "llm_configured": bool(settings.dashscope_api_key),
            "market_data_configured": bool(settings.finnhub_api_key),
            "web_content_configured": bool(settings.firecrawl_api_key),
            "max_iterations": settings.agent_max_iterations,
        },
    }

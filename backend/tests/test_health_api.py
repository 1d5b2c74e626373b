"""
Unit tests for Health API endpoints.

Tests dependency status and configuration reporting.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.health import get_mongodb, router
from src.core.config import Settings, get_settings

# ===== Fixtures =====


@pytest.fixture
def mock_mongodb():
    """Mock MongoDB instance."""
    mongodb = Mock()
    mongodb.health_check = AsyncMock(
        return_value={"connected": True, "database": "stock_consultant"}
    )
    return mongodb


@pytest.fixture
def settings():
    """Settings with only the model key configured."""
    return Settings(
        _env_file=None,
        environment="test",
        dashscope_api_key="sk-test",
        finnhub_api_key="",
        firecrawl_api_key="",
    )


@pytest.fixture
def client(mock_mongodb, settings):
    """Create test client with mocked dependencies."""
    app = FastAPI()
    app.include_router(router, prefix="/api")

    app.dependency_overrides[get_mongodb] = lambda: mock_mongodb
    app.dependency_overrides[get_settings] = lambda: settings

    return TestClient(app)


# ===== health_check Tests =====


class TestHealthCheck:
    """Test main health check endpoint."""

    def test_health_ok(self, client):
        """Test health check when MongoDB is reachable."""
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["environment"] == "test"
        assert data["dependencies"]["mongodb"]["connected"] is True

    def test_health_degraded(self, client, mock_mongodb):
        """Test health check when MongoDB is unreachable."""
        mock_mongodb.health_check.return_value = {
            "connected": False,
            "error": "No client connection",
        }

        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"

    def test_configuration_flags(self, client):
        """Missing tool keys are reported, not fatal."""
        configuration = client.get("/api/health").json()["configuration"]

        assert configuration == {
            "llm_configured": True,
            "market_data_configured": False,
            "web_content_configured": False,
            "max_iterations": None,
        }

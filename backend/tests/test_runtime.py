"""
Unit tests for startup wiring: MongoDB URL parsing and AgentRuntime assembly.
"""

from unittest.mock import AsyncMock, MagicMock, Mock

import pytest

from src.agent.runtime import AgentRuntime
from src.core.config import Settings
from src.core.exceptions import ConfigurationError, DatabaseError
from src.database.mongodb import MongoDB, parse_database_name

EXPECTED_TOOLS = (
    "get_user_watchlist",
    "get_stock_profile",
    "get_stock_quote",
    "get_market_news",
    "web_scrape",
    "financial_analysis",
)

# ===== Fixtures =====


@pytest.fixture
def mock_mongodb():
    mongodb = Mock()
    mongodb.get_collection = Mock(side_effect=lambda name: MagicMock(name=name))
    return mongodb


@pytest.fixture
def chat_model():
    model = Mock()
    model.bind_tools.return_value.ainvoke = AsyncMock()
    return model


# ===== MongoDB Tests =====


class TestParseDatabaseName:
    """Test database name extraction"""

    def test_plain_url(self):
        assert parse_database_name("mongodb://localhost:27017/stock_consultant") == (
            "stock_consultant"
        )

    def test_url_with_params(self):
        url = "mongodb://user:pw@host:10255/agentdb?ssl=true&replicaSet=globaldb"
        assert parse_database_name(url) == "agentdb"

    def test_missing_database(self):
        with pytest.raises(ConfigurationError):
            parse_database_name("mongodb://localhost:27017/")


class TestMongoDBManager:
    """Test connection manager without a server"""

    @pytest.mark.asyncio
    async def test_health_without_client(self):
        assert await MongoDB().health_check() == {
            "connected": False,
            "error": "No client connection",
        }

    def test_collection_requires_connection(self):
        with pytest.raises(DatabaseError):
            MongoDB().get_collection("watchlists")


# ===== AgentRuntime Tests =====


class TestAgentRuntime:
    """Test runtime assembly"""

    @pytest.mark.asyncio
    async def test_build_registers_six_tools(self, mock_mongodb, chat_model):
        settings = Settings(
            _env_file=None,
            agent_max_iterations=8,
            tool_timeout_seconds=12,
            llm_request_timeout=20,
        )

        runtime = AgentRuntime.build(settings, mock_mongodb, chat_model=chat_model)

        try:
            assert runtime.registry.names == EXPECTED_TOOLS
            assert runtime.loop.max_iterations == 8
            assert runtime.dispatcher.timeout_seconds == 12
            assert runtime.invoker.timeout_seconds == 20
            bound = chat_model.bind_tools.call_args[0][0]
            assert [tool["function"]["name"] for tool in bound] == list(EXPECTED_TOOLS)
            mock_mongodb.get_collection.assert_any_call("watchlists")
            mock_mongodb.get_collection.assert_any_call("user")
        finally:
            await runtime.close()

    def test_build_without_model_key(self, mock_mongodb):
        settings = Settings(_env_file=None, dashscope_api_key="")

        with pytest.raises(ConfigurationError):
            AgentRuntime.build(settings, mock_mongodb)

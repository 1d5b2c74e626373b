"""
Unit tests for the get_user_watchlist tool and WatchlistService.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest

from src.agent.tools.watchlist_tools import WatchlistLookupInput, create_watchlist_tools
from src.database.repositories.user_repository import UserRepository
from src.database.repositories.watchlist_repository import WatchlistRepository
from src.models.user import User
from src.models.watchlist import WatchlistItem
from src.services.watchlist_service import WatchlistService

# ===== Fixtures =====


@pytest.fixture
def mock_watchlist_repo():
    repo = Mock()
    repo.get_by_user = AsyncMock(
        return_value=[
            WatchlistItem(
                user_id="u1",
                symbol="TSLA",
                company="Tesla Inc",
                added_at=datetime(2025, 11, 2, tzinfo=UTC),
            ),
            WatchlistItem(
                user_id="u1",
                symbol="AAPL",
                company="Apple Inc",
                added_at=datetime(2025, 11, 1, tzinfo=UTC),
            ),
        ]
    )
    repo.get_symbols_by_user = AsyncMock(return_value=["TSLA", "AAPL"])
    return repo


@pytest.fixture
def mock_user_repo():
    repo = Mock()
    repo.get_by_email = AsyncMock(
        return_value=User(user_id="u1", email="a@example.com")
    )
    return repo


@pytest.fixture
def watchlist_service(mock_watchlist_repo, mock_user_repo):
    return WatchlistService(mock_watchlist_repo, mock_user_repo)


@pytest.fixture
def watchlist_tool(mock_watchlist_repo, watchlist_service):
    (tool,) = create_watchlist_tools(mock_watchlist_repo, watchlist_service)
    return tool


# ===== WatchlistService Tests =====


class TestWatchlistService:
    """Test email-based lookup"""

    @pytest.mark.asyncio
    async def test_symbols_by_email(self, watchlist_service, mock_watchlist_repo):
        symbols = await watchlist_service.get_symbols_by_email("a@example.com")

        assert symbols == ["TSLA", "AAPL"]
        mock_watchlist_repo.get_symbols_by_user.assert_awaited_once_with("u1")

    @pytest.mark.asyncio
    async def test_unknown_email(self, watchlist_service, mock_user_repo, mock_watchlist_repo):
        mock_user_repo.get_by_email.return_value = None

        assert await watchlist_service.get_symbols_by_email("nobody@example.com") == []
        mock_watchlist_repo.get_symbols_by_user.assert_not_called()


# ===== Tool Tests =====


class TestGetUserWatchlist:
    """Test the watchlist tool"""

    @pytest.mark.asyncio
    async def test_by_user_id(self, watchlist_tool):
        params = watchlist_tool.validate({"userId": "u1"})

        result = await watchlist_tool.run(params)

        assert result["success"] is True
        assert [item["symbol"] for item in result["watchlist"]] == ["TSLA", "AAPL"]
        assert result["watchlist"][0]["company"] == "Tesla Inc"
        assert set(result["watchlist"][0]) == {"userId", "symbol", "company", "addedAt"}
        assert result["watchlist"][0]["addedAt"].startswith("2025-11-02")
        assert result["message"] == "Retrieved 2 items from user's watchlist"

    @pytest.mark.asyncio
    async def test_by_email(self, watchlist_tool):
        params = watchlist_tool.validate({"email": "a@example.com"})

        result = await watchlist_tool.run(params)

        assert result["success"] is True
        assert result["symbols"] == ["TSLA", "AAPL"]
        assert result["message"] == "Found 2 symbols in watchlist: TSLA, AAPL"

    @pytest.mark.asyncio
    async def test_no_identifier(self, watchlist_tool, mock_watchlist_repo):
        result = await watchlist_tool.run(WatchlistLookupInput())

        assert result["success"] is False
        assert result["error"] == "No user identification provided"
        mock_watchlist_repo.get_by_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_database_error(self, watchlist_tool, mock_watchlist_repo):
        mock_watchlist_repo.get_by_user.side_effect = RuntimeError("connection reset")

        result = await watchlist_tool.run(watchlist_tool.validate({"userId": "u1"}))

        assert result["success"] is False
        assert result["error"] == "connection reset"
        assert result["message"] == "Failed to retrieve watchlist"


# ===== Lookup Equivalence Tests =====

WATCHLIST_DOCUMENTS = [
    {
        "_id": 1,
        "user_id": "u1",
        "symbol": "AAPL",
        "company": "Apple Inc",
        "added_at": datetime(2025, 11, 1, tzinfo=UTC),
    },
    {
        "_id": 2,
        "user_id": "u1",
        "symbol": "NVDA",
        "company": "NVIDIA Corp",
        "added_at": datetime(2025, 11, 3, tzinfo=UTC),
    },
    {
        "_id": 3,
        "user_id": "u2",
        "symbol": "MSFT",
        "company": "Microsoft Corp",
        "added_at": datetime(2025, 11, 2, tzinfo=UTC),
    },
    {
        "_id": 4,
        "user_id": "u1",
        "symbol": "TSLA",
        "company": "Tesla Inc",
        "added_at": datetime(2025, 11, 2, tzinfo=UTC),
    },
]

USER_DOCUMENTS = [
    {"_id": "oid-1", "id": "u1", "email": "a@example.com"},
    {"_id": "oid-2", "id": "u2", "email": "b@example.com"},
]


@pytest.fixture
def stored_watchlist_tool(cursor_factory):
    """Watchlist tool over real repositories sharing one set of stored documents."""

    def find(query, projection=None):
        matches = [
            dict(doc) for doc in WATCHLIST_DOCUMENTS if doc["user_id"] == query["user_id"]
        ]
        if projection:
            matches = [
                {key: doc[key] for key in ("_id", *projection) if key in doc}
                for doc in matches
            ]
        return cursor_factory(matches)

    async def find_one(query):
        for doc in USER_DOCUMENTS:
            if doc["email"] == query["email"]:
                return dict(doc)
        return None

    watchlist_collection = Mock()
    watchlist_collection.find = Mock(side_effect=find)
    users_collection = Mock()
    users_collection.find_one = AsyncMock(side_effect=find_one)

    watchlist_repo = WatchlistRepository(watchlist_collection)
    service = WatchlistService(watchlist_repo, UserRepository(users_collection))
    (tool,) = create_watchlist_tools(watchlist_repo, service)
    return tool


class TestLookupEquivalence:
    """Email and userId lookups over the same stored data"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "user_id,email", [("u1", "a@example.com"), ("u2", "b@example.com")]
    )
    async def test_same_symbol_set(self, stored_watchlist_tool, user_id, email):
        by_id = await stored_watchlist_tool.run(
            stored_watchlist_tool.validate({"userId": user_id})
        )
        by_email = await stored_watchlist_tool.run(
            stored_watchlist_tool.validate({"email": email})
        )

        assert by_id["success"] is True
        assert by_email["success"] is True
        assert {item["symbol"] for item in by_id["watchlist"]} == set(by_email["symbols"])

    @pytest.mark.asyncio
    async def test_user_id_path_newest_first(self, stored_watchlist_tool):
        result = await stored_watchlist_tool.run(
            stored_watchlist_tool.validate({"userId": "u1"})
        )

        assert [item["symbol"] for item in result["watchlist"]] == ["NVDA", "TSLA", "AAPL"]

"""
Agent runtime: startup wiring of clients, tools, and the control loop.

Every external client is built here once and passed by reference, so tests
can swap any of them for a double.
"""

from dataclasses import dataclass

import structlog
from langchain_core.language_models import BaseChatModel

from ..core.config import Settings
from ..database.mongodb import MongoDB
from ..database.repositories.user_repository import UserRepository
from ..database.repositories.watchlist_repository import WatchlistRepository
from ..services.firecrawl_service import FirecrawlService
from ..services.market_data import FinnhubMarketDataService
from ..services.watchlist_service import WatchlistService
from .control_loop import AgentControlLoop
from .llm_client import ModelInvoker, create_chat_model
from .tool_dispatcher import ToolDispatcher
from .tools import (
    ToolRegistry,
    create_market_tools,
    create_watchlist_tools,
    create_web_tools,
)

logger = structlog.get_logger()


def build_tool_registry(
    watchlist_repo: WatchlistRepository,
    watchlist_service: WatchlistService,
    market_data: FinnhubMarketDataService,
    firecrawl: FirecrawlService,
) -> ToolRegistry:
    """Assemble the six agent tools into a registry."""
    return ToolRegistry(
        [
            *create_watchlist_tools(watchlist_repo, watchlist_service),
            *create_market_tools(market_data),
            *create_web_tools(firecrawl),
        ]
    )


@dataclass(frozen=True)
class AgentRuntime:
    """Everything the chat API needs to run agent turns."""

    registry: ToolRegistry
    invoker: ModelInvoker
    dispatcher: ToolDispatcher
    loop: AgentControlLoop
    market_data: FinnhubMarketDataService
    firecrawl: FirecrawlService

    @classmethod
    def build(
        cls,
        settings: Settings,
        mongodb: MongoDB,
        chat_model: BaseChatModel | None = None,
    ) -> "AgentRuntime":
        """
        Construct the runtime from settings and a connected MongoDB.

        Args:
            settings: Application settings
            mongodb: Connected MongoDB manager
            chat_model: Optional chat model (defaults to ChatTongyi)

        Raises:
            ConfigurationError: If no chat model is given and DashScope is not configured
        """
        watchlist_repo = WatchlistRepository(
            mongodb.get_collection(settings.watchlist_collection)
        )
        user_repo = UserRepository(mongodb.get_collection(settings.users_collection))
        watchlist_service = WatchlistService(watchlist_repo, user_repo)
        market_data = FinnhubMarketDataService(settings)
        firecrawl = FirecrawlService(settings)

        registry = build_tool_registry(
            watchlist_repo, watchlist_service, market_data, firecrawl
        )
        invoker = ModelInvoker(
            chat_model or create_chat_model(settings),
            registry.descriptors,
            timeout_seconds=settings.llm_request_timeout,
        )
        dispatcher = ToolDispatcher(registry, timeout_seconds=settings.tool_timeout_seconds)
        loop = AgentControlLoop(
            invoker, dispatcher, max_iterations=settings.agent_max_iterations
        )

        logger.info(
            "Agent runtime built",
            tools=list(registry.names),
            max_iterations=settings.agent_max_iterations,
            tool_timeout_seconds=settings.tool_timeout_seconds,
        )

        return cls(
            registry=registry,
            invoker=invoker,
            dispatcher=dispatcher,
            loop=loop,
            market_data=market_data,
            firecrawl=firecrawl,
        )

    async def close(self) -> None:
        """Release HTTP clients."""
        await self.market_data.close()
        await self.firecrawl.close()

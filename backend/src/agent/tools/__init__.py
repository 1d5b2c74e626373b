"""Agent tools module.

Provides the six tools of the stock consultant agent.
"""

from .base import AgentTool, ToolDescriptor, tool_failure, tool_success
from .market_tools import create_market_tools
from .registry import ToolRegistry
from .watchlist_tools import create_watchlist_tools
from .web_tools import create_web_tools

__all__ = [
    "AgentTool",
    "ToolDescriptor",
    "ToolRegistry",
    "create_market_tools",
    "create_watchlist_tools",
    "create_web_tools",
    "tool_failure",
    "tool_success",
]

"""
Tool registry: the fixed set of tools available to the agent.

Built once at startup and read-only afterwards.
"""

from collections.abc import Iterable, Iterator
from types import MappingProxyType

import structlog

from ...core.exceptions import ConfigurationError
from .base import AgentTool, ToolDescriptor

logger = structlog.get_logger()


class ToolRegistry:
    """Immutable, name-addressable collection of agent tools."""

    __slots__ = ("_tools", "_descriptors")

    def __init__(self, tools: Iterable[AgentTool]):
        """
        Validate and freeze the tool set.

        Raises:
            ConfigurationError: If two tools share a name or the set is empty
        """
        tools = tuple(tools)
        if not tools:
            raise ConfigurationError("Tool registry requires at least one tool")

        by_name: dict[str, AgentTool] = {}
        for agent_tool in tools:
            if agent_tool.name in by_name:
                raise ConfigurationError(
                    f"Duplicate tool name: {agent_tool.name}", tool=agent_tool.name
                )
            by_name[agent_tool.name] = agent_tool

        self._tools = MappingProxyType(by_name)
        self._descriptors = tuple(agent_tool.descriptor for agent_tool in tools)

        logger.info("Tool registry built", tools=list(by_name))

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[AgentTool]:
        return iter(self._tools.values())

    def get(self, name: str) -> AgentTool | None:
        return self._tools.get(name)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._tools)

    @property
    def descriptors(self) -> tuple[ToolDescriptor, ...]:
        return self._descriptors

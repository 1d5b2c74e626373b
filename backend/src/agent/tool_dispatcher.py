"""
Tool dispatcher: runs one batch of model-requested tool calls.

Every call yields exactly one ToolResult, in call order. Unknown tools,
invalid arguments, timeouts, and tool faults all become failed results; none
of them abort sibling calls or the agent loop.
"""

import asyncio
import time
from collections.abc import Sequence

import structlog
from pydantic import ValidationError as PydanticValidationError

from .messages import ToolCall, ToolResult
from .tools.registry import ToolRegistry

logger = structlog.get_logger()


def format_validation_error(tool_name: str, error: PydanticValidationError) -> str:
    """Summarize a pydantic validation error for the model to act on."""
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "arguments"
        problems.append(f"{location}: {item.get('msg', 'invalid value')}")
    return f"Invalid arguments for {tool_name}: " + "; ".join(problems)


class ToolDispatcher:
    """Validates and executes tool calls against a ToolRegistry."""

    DEFAULT_TIMEOUT_SECONDS = 30.0

    def __init__(
        self,
        registry: ToolRegistry,
        timeout_seconds: float | None = DEFAULT_TIMEOUT_SECONDS,
    ):
        """
        Initialize dispatcher.

        Args:
            registry: Tools addressable by name
            timeout_seconds: Per-call time limit (None disables it)
        """
        self.registry = registry
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, calls: Sequence[ToolCall]) -> list[ToolResult]:
        """
        Execute a batch of tool calls concurrently.

        Args:
            calls: Tool calls from one assistant message

        Returns:
            One ToolResult per call, in the same order as ``calls``
        """
        if not calls:
            return []

        logger.info(
            "Dispatching tool calls",
            count=len(calls),
            tools=[call.name for call in calls],
        )

        # gather keeps input order regardless of completion order
        results = await asyncio.gather(*(self._execute(call) for call in calls))
        return list(results)

    async def _execute(self, call: ToolCall) -> ToolResult:
        agent_tool = self.registry.get(call.name)
        if agent_tool is None:
            logger.warning("Unknown tool requested", tool=call.name, call_id=call.id)
            return ToolResult.failed(
                call.id,
                f"Unknown tool: {call.name}. "
                f"Available tools: {', '.join(self.registry.names)}",
            )

        try:
            params = agent_tool.validate(call.arguments)
        except PydanticValidationError as e:
            error = format_validation_error(call.name, e)
            logger.warning("Tool arguments rejected", tool=call.name, error=error)
            return ToolResult.failed(call.id, error)

        start_time = time.perf_counter()
        try:
            if self.timeout_seconds:
                output = await asyncio.wait_for(
                    agent_tool.run(params), timeout=self.timeout_seconds
                )
            else:
                output = await agent_tool.run(params)
        except TimeoutError:
            logger.error(
                "Tool execution timed out",
                tool=call.name,
                timeout_seconds=self.timeout_seconds,
            )
            return ToolResult.failed(
                call.id, f"Tool {call.name} timed out after {self.timeout_seconds}s"
            )
        except Exception as e:
            logger.error(
                "Tool execution failed",
                tool=call.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return ToolResult.failed(call.id, f"{type(e).__name__}: {str(e)}")

        duration_ms = int((time.perf_counter() - start_time) * 1000)

        if isinstance(output, dict) and output.get("success") is False:
            error = str(output.get("error") or output.get("message") or "Tool failed")
            logger.info(
                "Tool reported failure",
                tool=call.name,
                error=error,
                duration_ms=duration_ms,
            )
            return ToolResult.failed(call.id, error, payload=output)

        logger.info("Tool executed", tool=call.name, duration_ms=duration_ms)
        return ToolResult.ok(call.id, output)

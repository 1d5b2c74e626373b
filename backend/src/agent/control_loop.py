"""
Agent control loop: explicit AGENT → TOOLS → AGENT … → DONE state machine.

Architecture:
    User message → AGENT (model call) ──no tool calls──→ DONE
                     ↑        │
                     │   tool calls
                     │        ↓
                     └──── TOOLS (dispatch batch, append results in call order)

Termination is decided by the model: the loop ends on the first assistant
message without tool calls. An optional iteration cap turns a runaway loop
into a turn failure.

Every append is a completed transition. If the model call fails, the
conversation keeps what was appended before it and the error is raised to
the caller; nothing is retried.
"""

import uuid
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from enum import Enum

import structlog

from ..core.exceptions import AgentIterationLimitError
from .llm_client import ModelInvoker
from .messages import Message, Role, ToolCall
from .prompts import STOCK_CONSULTANT_SYSTEM_PROMPT
from .state import ConversationState, ensure_system_prompt, has_system_prompt
from .tool_dispatcher import ToolDispatcher

logger = structlog.get_logger()


class AgentPhase(str, Enum):
    """Control loop states."""

    AGENT = "agent"  # Awaiting model decision
    TOOLS = "tools"  # Awaiting tool results
    DONE = "done"  # Terminal


@dataclass(frozen=True)
class TurnResult:
    """Outcome of one completed turn."""

    final_message: Message
    state: ConversationState
    model_calls: int
    tool_executions: int


class AgentControlLoop:
    """Runs conversation turns against a model invoker and tool dispatcher."""

    def __init__(
        self,
        invoker: ModelInvoker,
        dispatcher: ToolDispatcher,
        max_iterations: int | None = None,
        system_prompt: str = STOCK_CONSULTANT_SYSTEM_PROMPT,
    ):
        """
        Initialize control loop.

        Args:
            invoker: Model invoker with the tool registry bound
            dispatcher: Dispatcher over the same tool registry
            max_iterations: Maximum model calls per turn (None = unbounded)
            system_prompt: System message injected once per conversation
        """
        self.invoker = invoker
        self.dispatcher = dispatcher
        self.max_iterations = max_iterations
        self.system_prompt = system_prompt

    async def run_turn(
        self, state: ConversationState, user_message: str | Message
    ) -> TurnResult:
        """
        Run one turn to completion.

        Appends to ``state`` in place and returns it with the final message.

        Raises:
            ModelInvocationError: If a model call fails
            AgentIterationLimitError: If max_iterations is set and exceeded
        """
        model_calls = 0
        tool_executions = 0

        async for message in self._transitions(state, user_message):
            if message.role is Role.ASSISTANT:
                model_calls += 1
            elif message.role is Role.TOOL:
                tool_executions += 1

        # The loop only reaches DONE right after appending an assistant message
        final_message = state.messages[-1]

        return TurnResult(
            final_message=final_message,
            state=state,
            model_calls=model_calls,
            tool_executions=tool_executions,
        )

    async def stream_turn(
        self, state: ConversationState, user_message: str | Message
    ) -> AsyncGenerator[ConversationState, None]:
        """
        Run one turn, yielding a snapshot of the conversation after every append.

        Same transitions and failure behavior as run_turn; the last snapshot
        ends with the final assistant message.
        """
        async for _ in self._transitions(state, user_message):
            yield state.snapshot()

    async def _transitions(
        self, state: ConversationState, user_message: str | Message
    ) -> AsyncGenerator[Message, None]:
        """Drive the state machine, yielding each message as it is appended."""
        trace_id = f"turn_{uuid.uuid4().hex[:12]}"

        if not has_system_prompt(state):
            ensure_system_prompt(state, self.system_prompt)
            yield state.messages[0]

        if isinstance(user_message, str):
            user_message = Message.user(user_message)
        state.append(user_message)
        yield user_message

        logger.info(
            "Agent turn started",
            trace_id=trace_id,
            history_length=len(state),
            user_message_preview=user_message.content[:100],
        )

        phase = AgentPhase.AGENT
        iterations = 0
        pending: tuple[ToolCall, ...] = ()

        try:
            while phase is not AgentPhase.DONE:
                if phase is AgentPhase.AGENT:
                    if (
                        self.max_iterations is not None
                        and iterations >= self.max_iterations
                    ):
                        raise AgentIterationLimitError(
                            f"Agent exceeded {self.max_iterations} model calls in one turn",
                            trace_id=trace_id,
                        )

                    response = await self.invoker.invoke(tuple(state.messages))
                    iterations += 1
                    state.append(response)
                    yield response

                    if response.requests_tools:
                        pending = response.tool_calls
                        phase = AgentPhase.TOOLS
                    else:
                        phase = AgentPhase.DONE

                else:
                    results = await self.dispatcher.dispatch(pending)
                    for result in results:
                        tool_message = result.to_message()
                        state.append(tool_message)
                        yield tool_message

                    logger.info(
                        "Tool batch completed",
                        trace_id=trace_id,
                        iteration=iterations,
                        calls=len(pending),
                        failures=sum(1 for result in results if not result.success),
                    )
                    pending = ()
                    phase = AgentPhase.AGENT

        except Exception as e:
            logger.error(
                "Agent turn failed",
                trace_id=trace_id,
                phase=phase.value,
                iterations=iterations,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        logger.info(
            "Agent turn completed",
            trace_id=trace_id,
            model_calls=iterations,
            total_messages=len(state),
        )

"""
Chat API endpoints for the stock consultant agent.

Both endpoints run one agent turn over the conversation supplied by the
caller. /api/chat returns the finished turn; /api/chat/stream emits the
conversation after every append as Server-Sent Events.
"""

from collections.abc import AsyncGenerator

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from ..agent.control_loop import AgentControlLoop
from ..agent.messages import Message
from ..agent.prompts import build_user_context_line
from ..agent.state import ConversationState
from ..core.exceptions import AppError, ValidationError
from .schemas.chat_models import ChatRequest, ChatResponse, MessagePayload
from .streaming import create_done_event, create_error_event, create_state_event

logger = structlog.get_logger()

router = APIRouter(prefix="/api/chat", tags=["chat"])


def get_agent_loop(request: Request) -> AgentControlLoop:
    """Dependency to get the agent control loop from app state."""
    loop: AgentControlLoop = request.app.state.agent_runtime.loop
    return loop


def build_conversation(request: ChatRequest) -> tuple[ConversationState, Message]:
    """
    Convert a chat request into the state and user message for one turn.

    Raises:
        ValidationError: If the supplied history breaks message invariants
    """
    try:
        state = ConversationState.from_dicts(
            payload.model_dump(exclude_none=True) for payload in request.messages
        )
    except ValueError as e:
        raise ValidationError(f"Invalid conversation history: {str(e)}") from e

    context_line = build_user_context_line(request.user_id, request.email)
    content = f"{context_line}\n\n{request.message}" if context_line else request.message

    return state, Message.user(content)


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    loop: AgentControlLoop = Depends(get_agent_loop),
) -> ChatResponse:
    """
    Run one agent turn and return the updated conversation.

    Model failures surface as 502 responses via the AppError handler.
    """
    state, user_message = build_conversation(request)

    logger.info(
        "Chat turn requested",
        user_id=request.user_id,
        history_length=len(state),
    )

    result = await loop.run_turn(state, user_message)

    return ChatResponse(
        final_message=MessagePayload(**result.final_message.to_dict()),
        messages=[MessagePayload(**item) for item in result.state.to_dicts()],
        model_calls=result.model_calls,
        tool_executions=result.tool_executions,
    )


@router.post("/stream")
async def chat_stream(
    request: ChatRequest,
    loop: AgentControlLoop = Depends(get_agent_loop),
) -> StreamingResponse:
    """Run one agent turn, streaming the conversation after every append."""
    state, user_message = build_conversation(request)

    async def generate_stream() -> AsyncGenerator[str, None]:
        try:
            async for snapshot in loop.stream_turn(state, user_message):
                yield create_state_event(snapshot.to_dicts())
            yield create_done_event(total_messages=len(state))
        except AppError as e:
            yield create_error_event(e.message, e.error_type)
        except Exception as e:
            logger.error(
                "Chat stream failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            yield create_error_event(str(e), "internal_error")

    return StreamingResponse(generate_stream(), media_type="text/event-stream")

"""
Request/Response models for chat API endpoints.

The API is stateless: callers send the conversation they hold and get the
updated conversation back.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

# ===== Message Models =====


class ToolCallPayload(BaseModel):
    """Tool call requested by the assistant."""

    id: str = Field(..., description="Call identifier, unique within its message")
    name: str = Field(..., description="Registered tool name")
    arguments: dict[str, Any] = Field(default_factory=dict)


class MessagePayload(BaseModel):
    """One conversation message on the wire."""

    role: Literal["system", "user", "assistant", "tool"]
    content: str = ""
    tool_calls: list[ToolCallPayload] | None = Field(
        None, description="Present on assistant messages that request tools"
    )
    tool_call_id: str | None = Field(
        None, description="Required on tool messages: the call being answered"
    )


# ===== Request Models =====


class ChatRequest(BaseModel):
    """Chat turn request."""

    message: str = Field(
        ...,
        min_length=1,
        max_length=10000,
        description="New user message",
    )
    messages: list[MessagePayload] = Field(
        default_factory=list,
        description="Conversation so far, as returned by the previous turn",
    )
    user_id: str | None = Field(
        None, description="Signed-in user's id, offered to the watchlist tool"
    )
    email: str | None = Field(
        None, description="Signed-in user's email, offered to the watchlist tool"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "message": "What's in my watchlist?",
                "messages": [],
                "user_id": "u1",
            }
        }


# ===== Response Models =====


class ChatResponse(BaseModel):
    """Completed chat turn."""

    final_message: MessagePayload
    messages: list[MessagePayload]
    model_calls: int = Field(..., description="Model invocations during the turn")
    tool_executions: int = Field(..., description="Tool results appended during the turn")

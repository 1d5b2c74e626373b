"""
Agent message data model.

Messages are immutable once created; conversation history only grows by
appending new ones.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Author of a message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class ToolCall:
    """A model request to run one registered tool."""

    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"id": self.id, "name": self.name, "arguments": self.arguments}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolCall":
        """Create from dictionary."""
        return cls(
            id=data["id"], name=data["name"], arguments=data.get("arguments") or {}
        )


@dataclass(frozen=True)
class Message:
    """
    Single message in a conversation.

    A ``tool`` message carries the id of the call it answers. An ``assistant``
    message with ``tool_calls`` has empty or advisory content.
    """

    role: Role
    content: str = ""
    tool_calls: tuple[ToolCall, ...] = ()
    tool_call_id: str | None = None

    def __post_init__(self) -> None:
        if self.role is Role.TOOL and not self.tool_call_id:
            raise ValueError("tool messages require tool_call_id")
        if self.tool_calls and self.role is not Role.ASSISTANT:
            raise ValueError("only assistant messages may carry tool calls")
        ids = [call.id for call in self.tool_calls]
        if len(ids) != len(set(ids)):
            raise ValueError("tool call ids must be unique within a message")

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(
        cls, content: str = "", tool_calls: tuple[ToolCall, ...] = ()
    ) -> "Message":
        return cls(role=Role.ASSISTANT, content=content, tool_calls=tuple(tool_calls))

    @classmethod
    def tool(cls, content: str, tool_call_id: str) -> "Message":
        return cls(role=Role.TOOL, content=content, tool_call_id=tool_call_id)

    @property
    def requests_tools(self) -> bool:
        return bool(self.tool_calls)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            data["tool_calls"] = [call.to_dict() for call in self.tool_calls]
        if self.tool_call_id:
            data["tool_call_id"] = self.tool_call_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        """Create from dictionary."""
        return cls(
            role=Role(data["role"]),
            content=data.get("content") or "",
            tool_calls=tuple(
                ToolCall.from_dict(call) for call in data.get("tool_calls") or []
            ),
            tool_call_id=data.get("tool_call_id"),
        )


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one tool call: a payload on success, an error otherwise."""

    call_id: str
    success: bool
    payload: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, call_id: str, payload: Any) -> "ToolResult":
        return cls(call_id=call_id, success=True, payload=payload)

    @classmethod
    def failed(cls, call_id: str, error: str, payload: Any = None) -> "ToolResult":
        return cls(call_id=call_id, success=False, payload=payload, error=error)

    def to_message(self) -> Message:
        """Render as the ``tool`` message fed back to the model."""
        if self.payload is not None:
            body = self.payload
        else:
            body = {"success": self.success, "error": self.error}
        return Message.tool(
            content=json.dumps(body, default=str, ensure_ascii=False),
            tool_call_id=self.call_id,
        )

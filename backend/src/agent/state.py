"""
Conversation state management.
Following Factor 5: Unified State Management.

The caller owns a ConversationState across turns; during a turn the control
loop is its only writer.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from .messages import Message, Role
from .prompts import STOCK_CONSULTANT_SYSTEM_PROMPT


@dataclass
class ConversationState:
    """Ordered, append-only message history of one chat."""

    messages: list[Message] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)

    def append(self, message: Message) -> None:
        """Add a message to the end of the conversation."""
        self.messages.append(message)

    @property
    def last_message(self) -> Message | None:
        return self.messages[-1] if self.messages else None

    def snapshot(self) -> "ConversationState":
        """Independent copy; later appends to this state do not show in it."""
        return ConversationState(messages=list(self.messages))

    def to_dicts(self) -> list[dict[str, Any]]:
        """Convert to a list of dictionaries for serialization."""
        return [message.to_dict() for message in self.messages]

    @classmethod
    def from_dicts(cls, data: Iterable[dict[str, Any]]) -> "ConversationState":
        """Create from a list of dictionaries."""
        return cls(messages=[Message.from_dict(item) for item in data])


def has_system_prompt(state: ConversationState) -> bool:
    return bool(state.messages) and state.messages[0].role is Role.SYSTEM


def ensure_system_prompt(
    state: ConversationState, prompt: str = STOCK_CONSULTANT_SYSTEM_PROMPT
) -> ConversationState:
    """
    Prepend the system prompt unless position 0 already holds a system message.

    Idempotent: calling it on its own output changes nothing.
    """
    if not has_system_prompt(state):
        state.messages.insert(0, Message.system(prompt))
    return state

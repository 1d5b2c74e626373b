"""
API request/response schemas.
"""

from .chat_models import ChatRequest, ChatResponse, MessagePayload, ToolCallPayload

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "MessagePayload",
    "ToolCallPayload",
]

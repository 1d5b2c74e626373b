"""
Stock consultant agent.

An explicit control loop alternates between a LangChain chat model and a
fixed registry of market-data and web tools until the model stops
requesting tools.
"""

from .control_loop import AgentControlLoop, AgentPhase, TurnResult
from .llm_client import ModelInvoker
from .messages import Message, Role, ToolCall, ToolResult
from .runtime import AgentRuntime
from .state import ConversationState, ensure_system_prompt
from .tool_dispatcher import ToolDispatcher

__all__ = [
    "AgentControlLoop",
    "AgentPhase",
    "AgentRuntime",
    "ConversationState",
    "Message",
    "ModelInvoker",
    "Role",
    "ToolCall",
    "ToolDispatcher",
    "ToolResult",
    "TurnResult",
    "ensure_system_prompt",
]

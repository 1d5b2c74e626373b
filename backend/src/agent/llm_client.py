"""
LangChain-based model invoker for the agent loop.

Uses ChatTongyi (langchain-community) via Alibaba Cloud DashScope by default;
any LangChain chat model that implements ``bind_tools`` can be injected
instead (tests pass a fake).
"""

import asyncio
import uuid
from collections.abc import Sequence
from typing import Any

import structlog
from langchain_community.chat_models import ChatTongyi
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

from ..core.config import Settings
from ..core.exceptions import ConfigurationError, ModelInvocationError
from .messages import Message, Role, ToolCall
from .tools.base import ToolDescriptor

logger = structlog.get_logger()


def create_chat_model(settings: Settings) -> BaseChatModel:
    """
    Build the default DashScope chat model from settings.

    Raises:
        ConfigurationError: If the DashScope API key is missing
    """
    if not settings.dashscope_api_key:
        raise ConfigurationError(
            "DashScope API key not configured", service="dashscope"
        )

    chat = ChatTongyi(  # type: ignore[call-arg]  # LangChain stubs incomplete
        model_name=settings.default_llm_model,
        dashscope_api_key=settings.dashscope_api_key,
        temperature=settings.default_llm_temperature,
        model_kwargs={"result_format": "message"},  # Required for tool calls
        max_retries=1,  # One attempt, no retry
    )
    logger.info("ChatTongyi client initialized", model=settings.default_llm_model)
    return chat


def to_langchain_messages(history: Sequence[Message]) -> list[BaseMessage]:
    """
    Convert agent messages to LangChain message objects.

    Args:
        history: Conversation in order

    Returns:
        List of LangChain message objects
    """
    lc_messages: list[BaseMessage] = []
    for message in history:
        if message.role is Role.SYSTEM:
            lc_messages.append(SystemMessage(content=message.content))
        elif message.role is Role.USER:
            lc_messages.append(HumanMessage(content=message.content))
        elif message.role is Role.ASSISTANT:
            lc_messages.append(
                AIMessage(
                    content=message.content,
                    tool_calls=[
                        {
                            "name": call.name,
                            "args": call.arguments,
                            "id": call.id,
                            "type": "tool_call",
                        }
                        for call in message.tool_calls
                    ],
                )
            )
        else:
            lc_messages.append(
                ToolMessage(content=message.content, tool_call_id=message.tool_call_id)
            )
    return lc_messages


def _content_text(content: Any) -> str:
    # Some providers return a list of content parts instead of a string
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return str(content or "")


def from_langchain_message(response: BaseMessage) -> Message:
    """
    Convert a chat model response to an assistant Message.

    Missing or repeated tool call ids are replaced with fresh ones so that
    every call in the message can be answered unambiguously.

    Raises:
        ModelInvocationError: If the response is not an AIMessage
    """
    if not isinstance(response, AIMessage):
        raise ModelInvocationError(
            f"Model returned {type(response).__name__}, expected AIMessage"
        )

    if response.invalid_tool_calls:
        logger.warning(
            "Model emitted unparseable tool calls - ignored",
            count=len(response.invalid_tool_calls),
            names=[call.get("name") for call in response.invalid_tool_calls],
        )

    seen_ids: set[str] = set()
    tool_calls = []
    for call in response.tool_calls:
        call_id = call.get("id") or ""
        if not call_id or call_id in seen_ids:
            call_id = f"call_{uuid.uuid4().hex[:12]}"
        seen_ids.add(call_id)
        tool_calls.append(
            ToolCall(id=call_id, name=call["name"], arguments=dict(call.get("args") or {}))
        )

    return Message.assistant(
        content=_content_text(response.content), tool_calls=tuple(tool_calls)
    )


class ModelInvoker:
    """
    Single-shot model call with every registered tool bound.

    Returns exactly one assistant Message per call. Failures are raised as
    ModelInvocationError and never retried here.
    """

    def __init__(
        self,
        chat_model: BaseChatModel,
        descriptors: Sequence[ToolDescriptor],
        timeout_seconds: float | None = None,
    ):
        """
        Initialize invoker.

        Args:
            chat_model: LangChain chat model supporting bind_tools
            descriptors: Tool descriptors advertised to the model
            timeout_seconds: Per-call time limit (None disables it)
        """
        self.chat_model = chat_model
        self.timeout_seconds = timeout_seconds
        self.descriptors = tuple(descriptors)
        self.bound_model = chat_model.bind_tools(
            [descriptor.to_openai_tool() for descriptor in self.descriptors]
        )

        logger.info(
            "Model invoker initialized",
            model_type=type(chat_model).__name__,
            tools=[descriptor.name for descriptor in self.descriptors],
        )

    async def invoke(self, history: Sequence[Message]) -> Message:
        """
        Ask the model for the next assistant message.

        Args:
            history: Full conversation so far

        Returns:
            Assistant message, possibly requesting tool calls

        Raises:
            ModelInvocationError: On any transport, auth, or model error
        """
        lc_messages = to_langchain_messages(history)

        try:
            response = await asyncio.wait_for(
                self.bound_model.ainvoke(lc_messages), timeout=self.timeout_seconds
            )
        except TimeoutError as e:
            logger.error(
                "Model invocation timed out",
                timeout_seconds=self.timeout_seconds,
                message_count=len(lc_messages),
            )
            raise ModelInvocationError(
                f"Model invocation timed out after {self.timeout_seconds}s",
                original_error="TimeoutError",
            ) from e
        except Exception as e:
            logger.error(
                "Model invocation failed",
                error=str(e),
                error_type=type(e).__name__,
                message_count=len(lc_messages),
            )
            raise ModelInvocationError(
                f"Model invocation failed: {str(e)}",
                original_error=type(e).__name__,
            ) from e

        message = from_langchain_message(response)

        logger.info(
            "Model responded",
            tool_calls=[call.name for call in message.tool_calls],
            content_length=len(message.content),
        )

        return message

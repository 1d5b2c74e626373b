"""
Unit tests for the LangChain model invoker.

Tests cover:
- Message conversion in both directions
- Tool binding from registry descriptors
- Error wrapping and tool call id repair
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from langchain_core.messages import (
    AIMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

from src.agent.llm_client import (
    ModelInvoker,
    create_chat_model,
    from_langchain_message,
    to_langchain_messages,
)
from src.agent.messages import Message, Role, ToolCall
from src.agent.tools.base import ToolDescriptor
from src.core.config import Settings
from src.core.exceptions import ConfigurationError, ModelInvocationError

# ===== Fixtures =====


@pytest.fixture
def descriptors():
    return [
        ToolDescriptor(
            name="get_stock_quote",
            description="quote",
            input_schema={
                "type": "object",
                "properties": {"symbol": {"type": "string"}},
                "required": ["symbol"],
            },
        )
    ]


@pytest.fixture
def chat_model():
    """Chat model double whose bound model answers with a plain message."""
    model = Mock()
    model.bind_tools.return_value.ainvoke = AsyncMock(
        return_value=AIMessage(content="Hello!")
    )
    return model


# ===== Conversion =====


class TestToLangchainMessages:
    """Test agent → LangChain conversion"""

    def test_roles_map_to_message_types(self):
        history = [
            Message.system("sys"),
            Message.user("hi"),
            Message.assistant(
                tool_calls=[ToolCall(id="c1", name="get_stock_quote", arguments={"symbol": "AAPL"})]
            ),
            Message.tool('{"success": true}', tool_call_id="c1"),
        ]

        lc_messages = to_langchain_messages(history)

        assert isinstance(lc_messages[0], SystemMessage)
        assert isinstance(lc_messages[1], HumanMessage)
        assert isinstance(lc_messages[2], AIMessage)
        assert lc_messages[2].tool_calls[0]["id"] == "c1"
        assert lc_messages[2].tool_calls[0]["args"] == {"symbol": "AAPL"}
        assert isinstance(lc_messages[3], ToolMessage)
        assert lc_messages[3].tool_call_id == "c1"


class TestFromLangchainMessage:
    """Test LangChain → agent conversion"""

    def test_plain_answer(self):
        message = from_langchain_message(AIMessage(content="Done"))

        assert message.role is Role.ASSISTANT
        assert message.content == "Done"
        assert message.requests_tools is False

    def test_tool_calls_preserved(self):
        response = AIMessage(
            content="",
            tool_calls=[
                {"name": "get_stock_quote", "args": {"symbol": "AAPL"}, "id": "c1"},
                {"name": "get_stock_quote", "args": {"symbol": "TSLA"}, "id": "c2"},
            ],
        )

        message = from_langchain_message(response)

        assert [call.id for call in message.tool_calls] == ["c1", "c2"]
        assert message.tool_calls[1].arguments == {"symbol": "TSLA"}

    def test_missing_and_duplicate_ids_replaced(self):
        response = AIMessage(
            content="",
            tool_calls=[
                {"name": "a", "args": {}, "id": "dup"},
                {"name": "b", "args": {}, "id": "dup"},
                {"name": "c", "args": {}, "id": None},
            ],
        )

        message = from_langchain_message(response)
        ids = [call.id for call in message.tool_calls]

        assert ids[0] == "dup"
        assert len(set(ids)) == 3
        assert all(ids)

    def test_list_content_joined(self):
        response = AIMessage(
            content=[{"type": "text", "text": "Hello "}, {"type": "text", "text": "there"}]
        )

        assert from_langchain_message(response).content == "Hello there"

    def test_non_ai_message_rejected(self):
        with pytest.raises(ModelInvocationError):
            from_langchain_message(HumanMessage(content="hi"))


# ===== ModelInvoker =====


class TestModelInvoker:
    """Test the single-shot model call"""

    def test_binds_every_descriptor(self, chat_model, descriptors):
        ModelInvoker(chat_model, descriptors)

        bound_tools = chat_model.bind_tools.call_args[0][0]
        assert [tool["function"]["name"] for tool in bound_tools] == ["get_stock_quote"]

    @pytest.mark.asyncio
    async def test_invoke_returns_assistant_message(self, chat_model, descriptors):
        invoker = ModelInvoker(chat_model, descriptors)

        message = await invoker.invoke([Message.system("sys"), Message.user("hi")])

        assert message == Message.assistant("Hello!")
        sent = chat_model.bind_tools.return_value.ainvoke.call_args[0][0]
        assert [type(m) for m in sent] == [SystemMessage, HumanMessage]

    @pytest.mark.asyncio
    async def test_invoke_wraps_errors(self, chat_model, descriptors):
        chat_model.bind_tools.return_value.ainvoke = AsyncMock(
            side_effect=ConnectionError("network down")
        )
        invoker = ModelInvoker(chat_model, descriptors)

        with pytest.raises(ModelInvocationError) as exc_info:
            await invoker.invoke([Message.user("hi")])

        assert "network down" in exc_info.value.message
        assert exc_info.value.context["original_error"] == "ConnectionError"
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_invoke_times_out(self, chat_model, descriptors):
        async def hang(messages):
            await asyncio.sleep(1)

        chat_model.bind_tools.return_value.ainvoke = AsyncMock(side_effect=hang)
        invoker = ModelInvoker(chat_model, descriptors, timeout_seconds=0.01)

        with pytest.raises(ModelInvocationError, match="timed out") as exc_info:
            await invoker.invoke([Message.user("hi")])

        assert exc_info.value.context["original_error"] == "TimeoutError"


class TestCreateChatModel:
    """Test default model construction"""

    def test_missing_api_key(self):
        settings = Settings(_env_file=None, dashscope_api_key="")

        with pytest.raises(ConfigurationError, match="DashScope"):
            create_chat_model(settings)

    def test_single_attempt_configured(self):
        settings = Settings(_env_file=None, dashscope_api_key="sk-test")

        assert create_chat_model(settings).max_retries == 1

    @pytest.mark.asyncio
    async def test_throttled_call_not_retried(self):
        """A failed DashScope call reaches the caller after one request"""
        chat = create_chat_model(Settings(_env_file=None, dashscope_api_key="sk-test"))
        chat.client = Mock()
        chat.client.call.return_value = {
            "status_code": 429,
            "code": "Throttling.RateQuota",
            "message": "Requests rate limit exceeded",
            "request_id": "req-1",
        }
        invoker = ModelInvoker(chat, [])

        with pytest.raises(ModelInvocationError):
            await invoker.invoke([Message.user("hi")])

        assert chat.client.call.call_count == 1

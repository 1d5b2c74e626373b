"""
Tool definitions for the stock consultant agent.

A tool pairs a pydantic input model (its argument schema) with an async
handler. Handlers return the common result contract::

    {"success": True, <payload fields>..., "message": "..."}
    {"success": False, "error": "...", "message": "..."}

and never raise; the dispatcher still guards them.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, StringConstraints

ToolHandler = Callable[[Any], Awaitable[dict[str, Any]]]


def normalize_symbol(value: str) -> str:
    """Uppercase a ticker symbol at the call boundary (e.g., "aapl" -> "AAPL")."""
    return value.strip().upper()


Symbol = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=20),
    AfterValidator(normalize_symbol),
]


def tool_success(message: str, **payload: Any) -> dict[str, Any]:
    """Build a successful tool result."""
    return {"success": True, **payload, "message": message}


def tool_failure(error: Exception | str, message: str) -> dict[str, Any]:
    """Build a failed tool result from an exception or error text."""
    error_text = str(error) if str(error) else type(error).__name__
    return {"success": False, "error": error_text, "message": message}


@dataclass(frozen=True)
class ToolDescriptor:
    """Static description of a tool as advertised to the language model."""

    name: str
    description: str
    input_schema: dict[str, Any]

    def to_openai_tool(self) -> dict[str, Any]:
        """Render in the OpenAI function-calling format accepted by bind_tools."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema,
            },
        }


@dataclass(frozen=True)
class AgentTool:
    """One named capability: input contract plus handler."""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: ToolHandler
    descriptor: ToolDescriptor = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        object.__setattr__(
            self,
            "descriptor",
            ToolDescriptor(
                name=self.name, description=self.description, input_schema=schema
            ),
        )

    def validate(self, arguments: dict[str, Any]) -> BaseModel:
        """
        Validate raw call arguments against the input model.

        Raises:
            pydantic.ValidationError: If the arguments do not conform
        """
        return self.input_model.model_validate(arguments)

    async def run(self, params: BaseModel) -> dict[str, Any]:
        """Run the handler on already-validated parameters."""
        return await self.handler(params)

"""
Shared helper functions for streaming responses.

SSE event formatting for the streaming chat endpoint.
"""

import json
from typing import Any


def format_sse_event(event_data: dict[str, Any]) -> str:
    """
    Format a dictionary as an SSE (Server-Sent Events) event.

    Args:
        event_data: Dictionary containing event data

    Returns:
        SSE-formatted string with 'data: ' prefix and double newline
    """
    return f"data: {json.dumps(event_data, default=str)}\n\n"


def create_state_event(messages: list[dict[str, Any]]) -> str:
    """
    Create a formatted SSE event carrying the full conversation so far.

    Args:
        messages: Serialized conversation messages

    Returns:
        SSE-formatted state event string
    """
    return format_sse_event({"type": "state", "messages": messages})


def create_error_event(error_message: str, error_code: str) -> str:
    """
    Create a formatted SSE error event.

    Args:
        error_message: Human-readable error message
        error_code: Error code identifier (e.g., 'model_invocation_error')

    Returns:
        SSE-formatted error event string
    """
    error_data = {
        "error": error_message,
        "error_code": error_code,
        "type": "error",
    }
    return format_sse_event(error_data)


def create_done_event(**extra_data: Any) -> str:
    """
    Create a formatted SSE completion event.

    Args:
        **extra_data: Additional data to include in the event

    Returns:
        SSE-formatted completion event string
    """
    return format_sse_event({"type": "done", **extra_data})

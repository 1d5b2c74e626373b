"""
Custom exception hierarchy for proper error categorization and HTTP status mapping.

Distinguishes the failure classes of an agent turn:
- Turn failures: the language model could not be reached or answered badly,
  or the optional iteration cap tripped. These abort the turn.
- Tool failures: a collaborator (Finnhub, Firecrawl, MongoDB) failed or a tool
  is not configured. These are raised by clients and converted into failed
  tool results before they reach the loop.

Usage:
    from src.core.exceptions import ConfigurationError, ExternalServiceError

    # Missing credentials, raised at call time
    raise ConfigurationError("Finnhub API key not configured", service="finnhub")

    # External API errors → 503 Service Unavailable
    raise ExternalServiceError("Finnhub returned 429", service="finnhub")
"""

from typing import Any


class AppError(Exception):
    """
    Base application error with HTTP status mapping.

    All custom exceptions inherit from this to enable consistent error handling.
    """

    # Default status code (subclasses override)
    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, **context: Any):
        """
        Initialize error with message and optional context.

        Args:
            message: Human-readable error description
            **context: Additional key-value pairs for logging (e.g., user_id, symbol)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON response and structured logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "status_code": self.status_code,
            **self.context,
        }


# ===== 400-level: Client Errors =====


class ValidationError(AppError):
    """Caller provided invalid input (e.g., malformed conversation history)."""

    status_code = 400
    error_type = "validation_error"


# ===== 500-level: Server Errors =====


class DatabaseError(AppError):
    """
    Database operation failed (connection, query, schema issues).

    Maps to 500 Internal Server Error (our infrastructure problem).
    """

    status_code = 500
    error_type = "database_error"


class ConfigurationError(AppError):
    """
    Application misconfigured (e.g., missing API key for a tool).

    Tool credentials are checked when the tool runs, so this surfaces as a
    failed tool result rather than a startup failure.
    """

    status_code = 500
    error_type = "configuration_error"


class AgentIterationLimitError(AppError):
    """The agent loop exceeded the configured AGENT↔TOOLS iteration cap."""

    status_code = 500
    error_type = "agent_iteration_limit"


# ===== 502/503: External Service Errors =====


class ModelInvocationError(AppError):
    """
    Language model call failed (transport, auth, or malformed response).

    Fatal to the current turn. The conversation keeps every message appended
    before the failing call and nothing from it.
    """

    status_code = 502
    error_type = "model_invocation_error"


class ExternalServiceError(AppError):
    """
    External service unavailable or returned error.

    Examples:
        - Finnhub API rate limit
        - Firecrawl scrape returned success=false

    Maps to 503 Service Unavailable (third-party problem, retry may help).
    """

    status_code = 503
    error_type = "external_service_error"

    def __init__(self, message: str, service: str, **context: Any):
        """
        Initialize with service name for easier debugging.

        Args:
            message: Error description
            service: Service identifier (e.g., "finnhub", "firecrawl")
            **context: Additional context (e.g., symbol, url)
        """
        super().__init__(message, service=service, **context)

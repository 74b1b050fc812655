"""Export the exception hierarchy used across registration, dispatch, configuration and model calls."""

from .exceptions import (
    AgentError,
    LLMToolError,
    ToolRegistrationError,
    DuplicateToolName,
    ToolNotFoundError,
    ToolExecutionError,
    ToolValidationError,
    ConfigurationError,
    UnsupportedApiType,
    MissingCredentials,
    GatewayError,
    TranscriptProtocolError,
)

__all__ = [
    "AgentError",
    "LLMToolError",
    "ToolRegistrationError",
    "DuplicateToolName",
    "ToolNotFoundError",
    "ToolExecutionError",
    "ToolValidationError",
    "ConfigurationError",
    "UnsupportedApiType",
    "MissingCredentials",
    "GatewayError",
    "TranscriptProtocolError",
]

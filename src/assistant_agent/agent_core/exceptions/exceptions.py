"""
Custom exception classes for the assistant agent.

This module defines a hierarchy of exceptions used to handle errors during
tool registration, validation and execution, backend configuration, model
calls and transcript bookkeeping.
"""


class AgentError(Exception):
    """Base exception for all agent errors."""

    pass


class LLMToolError(AgentError):
    """Base exception for all tool-related errors."""

    pass


class ToolRegistrationError(LLMToolError):
    """Raised when there is an error registering a tool."""

    pass


class DuplicateToolName(ToolRegistrationError):
    """Raised when a tool name is registered twice."""

    pass


class ToolNotFoundError(LLMToolError):
    """Raised when a requested tool is not found in the registry."""

    pass


class ToolExecutionError(LLMToolError):
    """Raised when a tool fails during execution."""

    pass


class ToolValidationError(LLMToolError):
    """Raised when tool parameters or definition are invalid."""

    pass


class ConfigurationError(AgentError):
    """Raised when the agent cannot be configured. Fatal at startup."""

    pass


class UnsupportedApiType(ConfigurationError):
    """Raised when the selected backend dialect is not recognized."""

    pass


class MissingCredentials(ConfigurationError):
    """Raised when a hosted backend is selected without an API key."""

    pass


class GatewayError(AgentError):
    """Raised when the model backend fails (network, auth, rate limit, bad response)."""

    pass


class TranscriptProtocolError(AgentError):
    """Raised when a transcript mutation would break the tool-call protocol."""

    pass

"""Public exports for the agent core: tools, dispatch, session and orchestration."""

from .base import ChatGateway, ContentDelta, ToolCallEvent, GatewayEvent
from .tools import ToolRegistry
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
from .tools.models import ToolDefinition, ToolCallRequest, ToolCallResult
from .logger import get_logger, setup_logging
from .messages.models import (
    BaseMessage,
    UserMessage,
    AssistantMessage,
    SystemMessage,
    ToolMessage,
)
from .tools.execution import ToolDispatcher, looks_like_tool_call, extract_tool_call, repair_tool_call
from .tools.schema import SchemaValidator
from .session import Session, InputMode, TERMINATION_KEYWORD
from .orchestration import (
    TurnOrchestrator,
    TurnOutcome,
    TurnState,
    RepairMode,
    AssistantAgent,
    TurnObserver,
    NullObserver,
)

__all__ = [
    "ChatGateway",
    "ContentDelta",
    "ToolCallEvent",
    "GatewayEvent",
    "ToolDefinition",
    "ToolRegistry",
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
    "get_logger",
    "setup_logging",
    "BaseMessage",
    "UserMessage",
    "AssistantMessage",
    "SystemMessage",
    "ToolMessage",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolDispatcher",
    "looks_like_tool_call",
    "extract_tool_call",
    "repair_tool_call",
    "SchemaValidator",
    "Session",
    "InputMode",
    "TERMINATION_KEYWORD",
    "TurnOrchestrator",
    "TurnOutcome",
    "TurnState",
    "RepairMode",
    "AssistantAgent",
    "TurnObserver",
    "NullObserver",
]

"""Assistant Agent - a terminal assistant that lets a language model use local tools."""

from .agent_core import (
    AssistantAgent,
    Session,
    InputMode,
    TurnOrchestrator,
    TurnOutcome,
    RepairMode,
    ToolRegistry,
    ToolDispatcher,
    ToolDefinition,
    ToolCallRequest,
    ToolCallResult,
    UserMessage,
    AssistantMessage,
    SystemMessage,
    ToolMessage,
)
from .gateway import ModelGateway, ApiType, configure
from .tools import build_default_registry
from .config import AgentConfig

__all__ = [
    "AssistantAgent",
    "Session",
    "InputMode",
    "TurnOrchestrator",
    "TurnOutcome",
    "RepairMode",
    "ToolRegistry",
    "ToolDispatcher",
    "ToolDefinition",
    "ToolCallRequest",
    "ToolCallResult",
    "UserMessage",
    "AssistantMessage",
    "SystemMessage",
    "ToolMessage",
    "ModelGateway",
    "ApiType",
    "configure",
    "build_default_registry",
    "AgentConfig",
]

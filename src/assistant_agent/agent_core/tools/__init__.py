from .models import ToolDefinition, ToolCallRequest, ToolCallResult
from .registry import ToolRegistry
from .execution import ToolDispatcher, looks_like_tool_call, extract_tool_call, repair_tool_call
from .schema import SchemaValidator

__all__ = [
    "ToolDefinition",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolRegistry",
    "ToolDispatcher",
    "looks_like_tool_call",
    "extract_tool_call",
    "repair_tool_call",
    "SchemaValidator",
]

"""Tool-related data models."""

from .models import ToolDefinition, TOOL_NAME_PATTERN
from .tool_call import ToolCallRequest, ToolCallResult, new_call_id

__all__ = ["ToolDefinition", "TOOL_NAME_PATTERN", "ToolCallRequest", "ToolCallResult", "new_call_id"]

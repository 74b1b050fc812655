"""Tool dispatch and recovery of malformed calls."""

from .dispatcher import ToolDispatcher
from .repair import looks_like_tool_call, extract_tool_call, repair_tool_call

__all__ = ["ToolDispatcher", "looks_like_tool_call", "extract_tool_call", "repair_tool_call"]

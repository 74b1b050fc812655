"""The built-in tools: file system, file search, shell and dependency analysis."""

from ..agent_core.tools import ToolRegistry
from ..agent_core.tools.execution.repair import FILE_SEARCH_TOOL, FILE_SYSTEM_TOOL, SHELL_TOOL
from .dependencies import dependency_analysis_tool, DEPENDENCY_ANALYSIS_TOOL
from .filesystem import file_system_tool, resolve_path, CWD_PLACEHOLDER
from .search import file_search_tool, DEFAULT_IGNORE_DIRS
from .shell import ShellExecutor, DEFAULT_SHELL_TIMEOUT


def build_default_registry(shell_timeout: float = DEFAULT_SHELL_TIMEOUT) -> ToolRegistry:
    """A registry holding the built-in tools under their wire names."""
    registry = ToolRegistry()
    registry.register(FILE_SYSTEM_TOOL, func=file_system_tool)
    registry.register(FILE_SEARCH_TOOL, func=file_search_tool)
    registry.register(SHELL_TOOL, func=ShellExecutor(default_timeout=shell_timeout).execute)
    registry.register(DEPENDENCY_ANALYSIS_TOOL, func=dependency_analysis_tool)
    return registry


__all__ = [
    "build_default_registry",
    "dependency_analysis_tool",
    "file_system_tool",
    "file_search_tool",
    "ShellExecutor",
    "resolve_path",
    "CWD_PLACEHOLDER",
    "DEFAULT_IGNORE_DIRS",
    "DEFAULT_SHELL_TIMEOUT",
    "DEPENDENCY_ANALYSIS_TOOL",
]

"""Recovery of tool calls that a model wrote as prose instead of a structured call.

Smaller local models often narrate ("I'll use the fileSystemTool to ...") or paste the
JSON arguments into their answer. These helpers detect such text and rebuild a
``ToolCallRequest`` from it. They are pure: nothing here touches the transcript.
"""

import json
import re
from typing import Optional

from ...logger import get_logger
from ..models import ToolCallRequest, new_call_id

logger = get_logger(__name__)

FILE_SYSTEM_TOOL = "fileSystemTool"
FILE_SEARCH_TOOL = "fileSearchTool"
SHELL_TOOL = "bashExecutorTool"

_SIGNATURES = (
    re.compile(r'\{\s*"operation"\s*:', re.IGNORECASE),
    re.compile(r'\{\s*"command"\s*:', re.IGNORECASE),
    re.compile(FILE_SYSTEM_TOOL, re.IGNORECASE),
    re.compile(FILE_SEARCH_TOOL, re.IGNORECASE),
    re.compile(SHELL_TOOL, re.IGNORECASE),
    re.compile(r"use\s+.*\s+tool\s+to", re.IGNORECASE),
    re.compile(r"using\s+the\s+(file|search|bash)", re.IGNORECASE),
)

# One flat object mentioning "operation" or "command"; nested braces are not followed.
_CALL_OBJECT = re.compile(r'\{[^{]*"(operation|command)"[^}]*\}')

_ROUTES = {
    "read": FILE_SYSTEM_TOOL,
    "listDirectories": FILE_SYSTEM_TOOL,
    "find": FILE_SEARCH_TOOL,
    "grep": FILE_SEARCH_TOOL,
    "exploreProject": FILE_SEARCH_TOOL,
}


def looks_like_tool_call(text: Optional[str]) -> bool:
    """True when ``text`` carries one of the signatures of an attempted tool call."""
    if not text:
        return False
    return any(pattern.search(text) for pattern in _SIGNATURES)


def extract_tool_call(text: str) -> Optional[ToolCallRequest]:
    """Rebuild a tool call from the first JSON object in ``text``.

    Routing: ``operation`` read/listDirectories goes to the file-system tool,
    find/grep/exploreProject to the search tool, a ``command`` key to the shell tool.

    Returns:
        A request with a fresh ``repair_`` id, or None when nothing usable was found.
    """
    match = _CALL_OBJECT.search(text)
    if match is None:
        return None

    span = match.group(0)
    try:
        payload = json.loads(span)
    except json.JSONDecodeError:
        logger.debug("Candidate tool call is not valid JSON: %s", span)
        return None

    if not isinstance(payload, dict):
        return None

    operation = payload.get("operation")
    tool_name = _ROUTES.get(operation) if isinstance(operation, str) else None
    if tool_name is None and payload.get("command"):
        tool_name = SHELL_TOOL
    if tool_name is None:
        return None

    return ToolCallRequest(name=tool_name, arguments=span, call_id=new_call_id("repair"))


def repair_tool_call(text: Optional[str]) -> Optional[ToolCallRequest]:
    """Detect and extract in one step. Plain prose yields None."""
    if not looks_like_tool_call(text):
        return None
    repaired = extract_tool_call(text)  # type: ignore[arg-type]
    if repaired is not None:
        logger.info("Recovered '%s' call from assistant text.", repaired.name)
    return repaired

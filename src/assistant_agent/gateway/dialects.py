"""Backend dialects and the data that describes how they differ."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Pattern, Sequence, List

from ..agent_core.exceptions import UnsupportedApiType

DEFAULT_LOCAL_BASE_URL = "http://localhost:11434/v1"
# Ollama ignores the key, the OpenAI client insists on one.
LOCAL_PLACEHOLDER_API_KEY = "sk-no-key-required"

SMALL_MODEL_MARKERS = ("mini", "phi", "mistral")

SMALL_MODEL_INSTRUCTION = """CRITICAL: You are using a smaller model that may struggle with function calling.
ALWAYS format tool calls EXACTLY as demonstrated:

CORRECT: { "operation": "read", "filePath": "/path/to/file" }
CORRECT: { "command": "ls -la" }

NEVER use text like "I'll use X tool" or "Using function X". ONLY output the JSON object."""


class ApiType(str, Enum):
    HOSTED = "hosted"
    LOCAL_COMPATIBLE = "local-compatible"

    @classmethod
    def parse(cls, value: "str | ApiType") -> "ApiType":
        """Resolve a configured backend name.

        Raises:
            UnsupportedApiType: For anything but a recognized dialect.
        """
        if isinstance(value, ApiType):
            return value
        key = str(value).strip().lower()
        resolved = _ALIASES.get(key)
        if resolved is None:
            known = ", ".join(sorted(_ALIASES))
            raise UnsupportedApiType(f"Unknown API type: '{value}'. Expected one of: {known}.")
        return resolved


_ALIASES = {
    "hosted": ApiType.HOSTED,
    "openai": ApiType.HOSTED,
    "local-compatible": ApiType.LOCAL_COMPATIBLE,
    "local": ApiType.LOCAL_COMPATIBLE,
    "ollama": ApiType.LOCAL_COMPATIBLE,
}


@dataclass(frozen=True)
class DialectProfile:
    """What a backend dialect tolerates.

    Attributes:
        api_type: The dialect described.
        tool_name_pattern: Tool names the backend accepts; None when it accepts anything.
        requires_credentials: Whether an API key must be configured.
        default_base_url: Endpoint used when none is configured; None means the client default.
        placeholder_api_key: Key sent when none is configured.
        announce_tool_names: Whether the exact tool names are repeated in a system instruction.
    """

    api_type: ApiType
    tool_name_pattern: Optional[Pattern[str]]
    requires_credentials: bool
    announce_tool_names: bool
    default_base_url: Optional[str] = None
    placeholder_api_key: Optional[str] = None

    def accepts_tool_name(self, name: str) -> bool:
        if self.tool_name_pattern is None:
            return True
        return "." not in name and bool(self.tool_name_pattern.match(name))

    def system_instructions(self, model_name: str, tool_names: Sequence[str]) -> List[str]:
        """Extra system instructions sent after the session's own system message.

        Nothing is produced without tools.
        """
        if not tool_names:
            return []
        instructions = []
        if self.announce_tool_names:
            names = ", ".join(tool_names)
            instructions.append(
                f"IMPORTANT: When using tools, you must use ONLY the exact tool names as defined ({names}). "
                "Never add operations or methods to the tool name with dots."
            )
        if is_small_model(model_name):
            instructions.append(SMALL_MODEL_INSTRUCTION)
        return instructions


PROFILES = {
    ApiType.HOSTED: DialectProfile(
        api_type=ApiType.HOSTED,
        tool_name_pattern=re.compile(r"^[a-zA-Z0-9_-]+$"),
        requires_credentials=True,
        announce_tool_names=True,
    ),
    ApiType.LOCAL_COMPATIBLE: DialectProfile(
        api_type=ApiType.LOCAL_COMPATIBLE,
        tool_name_pattern=None,
        requires_credentials=False,
        announce_tool_names=False,
        default_base_url=DEFAULT_LOCAL_BASE_URL,
        placeholder_api_key=LOCAL_PLACEHOLDER_API_KEY,
    ),
}


def is_small_model(model_name: str) -> bool:
    lowered = model_name.lower()
    return any(marker in lowered for marker in SMALL_MODEL_MARKERS)

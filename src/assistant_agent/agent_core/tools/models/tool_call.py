"""Data models for tool execution."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional


def new_call_id(prefix: str = "call") -> str:
    """Generate an opaque tool-call id for calls the backend did not label."""
    return f"{prefix}_{uuid.uuid4().hex[:24]}"


@dataclass(frozen=True)
class ToolCallRequest:
    """Represents a normalized tool call request from an LLM response."""

    name: str
    arguments: Any
    call_id: Optional[str] = None

    @property
    def arguments_text(self) -> str:
        """Arguments as JSON text, the form the chat transcript carries."""
        if self.arguments is None:
            return "{}"
        if isinstance(self.arguments, str):
            return self.arguments
        return json.dumps(self.arguments)

    def to_openai(self) -> Dict[str, Any]:
        return {
            "id": self.call_id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments_text},
        }


@dataclass(frozen=True)
class ToolCallResult:
    """Represents the outcome of executing a tool call."""

    name: str
    response: Dict[str, Any]
    call_id: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return "error" in self.response

    @property
    def content(self) -> str:
        """Text placed in the tool message sent back to the model."""
        return json.dumps(self.response, ensure_ascii=False)

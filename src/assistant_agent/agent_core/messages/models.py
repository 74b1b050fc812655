"""Provider-agnostic message models for the conversation transcript."""

from abc import ABC
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel

from ..tools.models import ToolCallRequest

Role = Literal["system", "user", "assistant", "tool"]


class BaseMessage(ABC, BaseModel):
    """Base model for transcript entries.

    Attributes:
        role: Author of the message.
        content: Text payload of the message, None for assistant messages that only carry tool calls.
    """

    role: Role
    content: Optional[str] = None

    def to_openai(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}


class SystemMessage(BaseMessage):
    """Message authored by the system to steer behavior."""

    role: Literal["system"] = "system"


class UserMessage(BaseMessage):
    """Message authored by the human."""

    role: Literal["user"] = "user"


class AssistantMessage(BaseMessage):
    """Message authored by the model, optionally requesting tool calls."""

    role: Literal["assistant"] = "assistant"
    tool_calls: Optional[List[ToolCallRequest]] = None

    def to_openai(self) -> Dict[str, Any]:
        message = super().to_openai()
        if self.tool_calls:
            message["tool_calls"] = [call.to_openai() for call in self.tool_calls]
        return message


class ToolMessage(BaseMessage):
    """Result of one tool call, bound to its request by ``tool_call_id``."""

    role: Literal["tool"] = "tool"
    tool_call_id: str
    name: str

    def to_openai(self) -> Dict[str, Any]:
        return {"role": "tool", "content": self.content or "", "tool_call_id": self.tool_call_id, "name": self.name}

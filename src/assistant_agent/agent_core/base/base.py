"""Core abstractions shared by the orchestrator and the model gateway."""

from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, Sequence, Union

from ..messages import BaseMessage
from ..tools.models import ToolCallRequest


@dataclass(frozen=True)
class ContentDelta:
    """A piece of assistant text, forwarded as it arrives."""

    text: str


@dataclass(frozen=True)
class ToolCallEvent:
    """One complete tool call requested by the model."""

    request: ToolCallRequest


GatewayEvent = Union[ContentDelta, ToolCallEvent]


class ChatGateway(Protocol):
    """
    The call contract the orchestrator relies on.

    ``complete`` sends the transcript (and tool declarations, if any) and yields the
    response as events: text deltas while the model writes, then every tool call in
    request order. Backend failures surface as ``GatewayError``.
    """

    def complete(
        self, messages: Sequence[BaseMessage], tools: Optional[List[Dict[str, Any]]] = None
    ) -> AsyncIterator[GatewayEvent]:
        """Stream one model response as events."""
        ...

    def accepts_tool_name(self, name: str) -> bool:
        """Whether the active dialect allows a call with this tool name to be dispatched."""
        ...

"""Conversation session: the transcript and the bookkeeping around it."""

from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..exceptions import TranscriptProtocolError
from ..logger import get_logger
from ..messages import AssistantMessage, BaseMessage, SystemMessage, ToolMessage, UserMessage
from ..tools.models import ToolDefinition

logger = get_logger(__name__)

TERMINATION_KEYWORD = "TERMINATE"


class InputMode(str, Enum):
    """Whether the human is asked for another prompt after each answer."""

    ALWAYS = "ALWAYS"
    NEVER = "NEVER"


def contains_termination_keyword(text: Optional[str]) -> bool:
    return bool(text) and TERMINATION_KEYWORD in text.upper()  # type: ignore[union-attr]


class Session:
    """
    Owns the running transcript of one process run.

    The system message sits at index 0 for the whole lifetime of the session. The
    transcript is append-only and is only mutated through the methods below, which
    keep the tool-call protocol intact: every tool message answers an open request,
    and no request is left open when a new user turn starts. Once terminated, the
    session refuses further mutation.
    """

    def __init__(
        self,
        system_prompt: str,
        toolset: Optional[Mapping[str, ToolDefinition]] = None,
        input_mode: InputMode = InputMode.ALWAYS,
    ) -> None:
        self._transcript: List[BaseMessage] = [SystemMessage(content=system_prompt)]
        self._toolset: Dict[str, ToolDefinition] = dict(toolset or {})
        self._pending: Dict[str, str] = {}
        self.input_mode = InputMode(input_mode)
        self.terminated = False
        self.turn_count = 0

    @property
    def transcript(self) -> Tuple[BaseMessage, ...]:
        """Read-only view of the transcript."""
        return tuple(self._transcript)

    @property
    def system_prompt(self) -> str:
        return self._transcript[0].content or ""

    @property
    def toolset(self) -> Mapping[str, ToolDefinition]:
        return dict(self._toolset)

    @property
    def pending_tool_call_ids(self) -> List[str]:
        """Ids of tool calls that were requested but not answered yet, in request order."""
        return list(self._pending)

    def begin_turn(self, prompt: str) -> UserMessage:
        """Append the user message that opens a new turn."""
        self._ensure_active()
        if self._pending:
            raise TranscriptProtocolError(
                f"Cannot start a new turn with unanswered tool calls: {', '.join(self._pending)}"
            )
        message = UserMessage(content=prompt)
        self._transcript.append(message)
        self.turn_count += 1
        logger.debug("Turn %d started.", self.turn_count)
        return message

    def record_assistant(self, content: Optional[str], tool_calls: Optional[Sequence] = None) -> AssistantMessage:
        """Append a model message; its tool calls become pending until answered."""
        self._ensure_active()
        if self._pending:
            raise TranscriptProtocolError("Previous tool calls must be answered before the model speaks again.")
        calls = list(tool_calls) if tool_calls else None
        pending: Dict[str, str] = {}
        for call in calls or []:
            if not call.call_id:
                raise TranscriptProtocolError(f"Tool call '{call.name}' has no id.")
            if call.call_id in pending:
                raise TranscriptProtocolError(f"Duplicate tool call id '{call.call_id}'.")
            pending[call.call_id] = call.name
        message = AssistantMessage(content=content, tool_calls=calls)
        self._pending.update(pending)
        self._transcript.append(message)
        return message

    def record_tool_result(self, tool_call_id: str, name: str, content: str) -> ToolMessage:
        """Append the answer to a pending tool call.

        Answers must arrive in the order the calls were requested.
        """
        self._ensure_active()
        if tool_call_id not in self._pending:
            raise TranscriptProtocolError(f"Tool result for unknown or already answered call '{tool_call_id}'.")
        expected = next(iter(self._pending))
        if tool_call_id != expected:
            raise TranscriptProtocolError(
                f"Tool result for '{tool_call_id}' arrived before the result for '{expected}'."
            )
        del self._pending[tool_call_id]
        message = ToolMessage(content=content, tool_call_id=tool_call_id, name=name)
        self._transcript.append(message)
        return message

    def terminate(self) -> None:
        if not self.terminated:
            logger.info("Session terminated after %d turn(s).", self.turn_count)
        self.terminated = True

    def _ensure_active(self) -> None:
        if self.terminated:
            raise TranscriptProtocolError("Session is terminated.")

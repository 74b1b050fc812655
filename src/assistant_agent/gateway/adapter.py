"""Translation between OpenAI-compatible responses and the agent's tool-call protocol."""

from typing import Any, Dict, List, Optional, Sequence

from openai.types.chat import ChatCompletion
from openai.types.chat.chat_completion_chunk import ChoiceDeltaToolCall

from ..agent_core.logger import get_logger
from ..agent_core.tools.models import ToolCallRequest, new_call_id

logger = get_logger(__name__)


class ToolCallAccumulator:
    """Reassembles tool calls from streamed ``delta.tool_calls`` fragments.

    The backend sends the id and name once and the arguments in pieces, keyed by
    the call's index in the batch.
    """

    def __init__(self) -> None:
        self._calls: Dict[int, Dict[str, str]] = {}

    def add(self, fragments: Optional[Sequence[ChoiceDeltaToolCall]]) -> None:
        for fragment in fragments or []:
            index = fragment.index if fragment.index is not None else len(self._calls)
            current = self._calls.setdefault(index, {"id": "", "name": "", "arguments": ""})
            if fragment.id:
                current["id"] = fragment.id
            if fragment.function is not None:
                if fragment.function.name:
                    current["name"] = fragment.function.name
                if fragment.function.arguments:
                    current["arguments"] += fragment.function.arguments

    def requests(self) -> List[ToolCallRequest]:
        """Completed calls in index order. Fragments that never received a name are dropped."""
        requests = []
        for index in sorted(self._calls):
            call = self._calls[index]
            if not call["name"]:
                logger.warning(f"Dropping streamed tool call #{index} without a function name.")
                continue
            requests.append(
                ToolCallRequest(
                    name=call["name"],
                    arguments=call["arguments"],
                    call_id=call["id"] or new_call_id(),
                )
            )
        return requests


class OpenAIResponseAdapter:
    """Reads content and tool calls out of a non-streamed chat completion."""

    @staticmethod
    def get_content(response: ChatCompletion) -> str:
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    @staticmethod
    def get_tool_calls(response: ChatCompletion) -> List[ToolCallRequest]:
        """Extract tool calls from an OpenAI chat completion response.

        Args:
            response: The chat completion response.

        Returns:
            The function tool calls of the first choice, in order.
        """
        if not response.choices:
            return []

        tool_calls = response.choices[0].message.tool_calls
        if not tool_calls:
            return []

        requests = []
        for tool_call in tool_calls:
            if tool_call.type != "function":
                continue
            function: Any = tool_call.function
            requests.append(
                ToolCallRequest(
                    name=function.name,
                    arguments=function.arguments,
                    call_id=tool_call.id or new_call_id(),
                )
            )
        return requests

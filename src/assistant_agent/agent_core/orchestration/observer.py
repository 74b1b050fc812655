"""Output surface the orchestrator reports to."""

from typing import Protocol

from ..tools.models import ToolCallRequest, ToolCallResult


class TurnObserver(Protocol):
    """Receives everything the human should see while a turn runs."""

    def on_content(self, text: str) -> None:
        """A piece of assistant text arrived."""
        ...

    def on_tool_call(self, request: ToolCallRequest) -> None:
        ...

    def on_tool_result(self, result: ToolCallResult) -> None:
        ...

    def on_warning(self, message: str) -> None:
        ...

    def on_notice(self, message: str) -> None:
        """Informational output that is not part of the conversation (e.g. ``cd`` reports)."""
        ...

    def on_error(self, message: str) -> None:
        """A failure that ended the turn, such as an unreachable backend."""
        ...

    def on_turn_complete(self, final_content: str) -> None:
        ...


class NullObserver:
    """Observer that discards everything."""

    def on_content(self, text: str) -> None:
        pass

    def on_tool_call(self, request: ToolCallRequest) -> None:
        pass

    def on_tool_result(self, result: ToolCallResult) -> None:
        pass

    def on_warning(self, message: str) -> None:
        pass

    def on_notice(self, message: str) -> None:
        pass

    def on_error(self, message: str) -> None:
        pass

    def on_turn_complete(self, final_content: str) -> None:
        pass

"""Turn orchestration: model round trips, tool dispatch and termination."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..base import ChatGateway, ContentDelta, ToolCallEvent
from ..exceptions import GatewayError
from ..logger import get_logger
from ..session import InputMode, Session, contains_termination_keyword
from ..tools.execution import ToolDispatcher, looks_like_tool_call, repair_tool_call
from ..tools.models import ToolCallRequest, ToolCallResult, new_call_id
from .observer import NullObserver, TurnObserver

logger = get_logger(__name__)


class TurnState(str, Enum):
    AWAITING_MODEL = "AWAITING_MODEL"
    STREAMING_CONTENT = "STREAMING_CONTENT"
    HANDLING_TOOL_CALLS = "HANDLING_TOOL_CALLS"
    TURN_COMPLETE = "TURN_COMPLETE"
    AWAITING_HUMAN = "AWAITING_HUMAN"
    SESSION_TERMINATED = "SESSION_TERMINATED"


class RepairMode(str, Enum):
    """What happens to a tool call recovered from assistant prose.

    DISPATCH runs it like any other call, ADVISORY only reports it, OFF skips detection.
    """

    DISPATCH = "dispatch"
    ADVISORY = "advisory"
    OFF = "off"


@dataclass(frozen=True)
class TurnOutcome:
    final_content: str
    terminated: bool
    tool_rounds: int


class TurnOrchestrator:
    """
    Drives one conversational turn against the model.

    The model is called with the full transcript and the tool declarations. Every tool
    call it requests is answered, in request order, before the model is called again.
    This repeats until a response carries no tool call; that response is the turn's
    final content. The orchestrator is the only writer of the session transcript.
    """

    def __init__(
        self,
        session: Session,
        gateway: ChatGateway,
        dispatcher: ToolDispatcher,
        *,
        observer: Optional[TurnObserver] = None,
        repair_mode: RepairMode | str = RepairMode.DISPATCH,
        max_tool_rounds: Optional[int] = None,
    ) -> None:
        """
        Args:
            session: The conversation session to mutate.
            gateway: Backend the transcript is sent to.
            dispatcher: Executes tool calls against the registry.
            observer: Output surface. Defaults to discarding output.
            repair_mode: Handling of tool calls recovered from prose.
            max_tool_rounds: Optional cap on tool rounds per turn. None means no cap.
        """
        self.session = session
        self._gateway = gateway
        self._dispatcher = dispatcher
        self._observer: TurnObserver = observer or NullObserver()
        self._repair_mode = RepairMode(repair_mode)
        self._max_tool_rounds = max_tool_rounds
        self._tools = dispatcher.registry.tool_object
        self._state = TurnState.AWAITING_HUMAN

    @property
    def state(self) -> TurnState:
        return self._state

    async def run_turn(self, prompt: str) -> TurnOutcome:
        """Run one turn for ``prompt`` and decide what comes next.

        Gateway failures do not escape: their message becomes the turn's content.
        """
        self.session.begin_turn(prompt)
        rounds = 0
        try:
            final_content, rounds = await self._converse()
        except GatewayError as exc:
            final_content = f"Error during model call: {exc}"
            logger.warning(final_content)
            self._observer.on_error(final_content)
            self.session.record_assistant(final_content)

        self._state = TurnState.TURN_COMPLETE
        self._observer.on_turn_complete(final_content)

        terminated = contains_termination_keyword(final_content) or self.session.input_mode is InputMode.NEVER
        if terminated:
            self.session.terminate()
            self._state = TurnState.SESSION_TERMINATED
        else:
            self._state = TurnState.AWAITING_HUMAN
        return TurnOutcome(final_content=final_content, terminated=terminated, tool_rounds=rounds)

    async def _converse(self) -> Tuple[str, int]:
        rounds = 0
        while True:
            content, calls = await self._request_model()

            if not calls:
                repaired = self._repair(content)
                if repaired is None:
                    self.session.record_assistant(content)
                    return content, rounds
                calls = [repaired]

            calls = self._with_unique_ids(calls)
            self.session.record_assistant(content or None, calls)
            await self._handle_tool_calls(calls)
            rounds += 1

            if self._max_tool_rounds is not None and rounds >= self._max_tool_rounds:
                notice = f"Stopped after {rounds} tool round(s) without a final answer."
                logger.warning(notice)
                self._observer.on_warning(notice)
                self.session.record_assistant(notice)
                return notice, rounds

    async def _request_model(self) -> Tuple[str, List[ToolCallRequest]]:
        self._state = TurnState.AWAITING_MODEL
        parts: List[str] = []
        calls: List[ToolCallRequest] = []

        async for event in self._gateway.complete(list(self.session.transcript), self._tools):
            if isinstance(event, ContentDelta):
                self._state = TurnState.STREAMING_CONTENT
                parts.append(event.text)
                self._observer.on_content(event.text)
            elif isinstance(event, ToolCallEvent):
                calls.append(event.request)

        if calls:
            self._state = TurnState.HANDLING_TOOL_CALLS
            logger.info(f"Model requested {len(calls)} tool call(s).")
        return "".join(parts), calls

    async def _handle_tool_calls(self, calls: List[ToolCallRequest]) -> None:
        self._state = TurnState.HANDLING_TOOL_CALLS
        for call in calls:
            self._observer.on_tool_call(call)
            if self._gateway.accepts_tool_name(call.name):
                result = await self._dispatcher.dispatch(call)
            else:
                result = self._reject_tool_name(call)
            self.session.record_tool_result(call.call_id or "", call.name, result.content)
            self._observer.on_tool_result(result)

    def _reject_tool_name(self, call: ToolCallRequest) -> ToolCallResult:
        """Answer a call whose name the backend dialect forbids, without executing it."""
        names = ", ".join(self._dispatcher.registry.tool_names)
        msg = (
            f"Invalid tool name: {call.name}. This backend requires simple tool names without dots. "
            f"Use one of: {names}."
        )
        logger.warning(msg)
        self._observer.on_warning(msg)
        return ToolCallResult(name=call.name, response={"error": msg}, call_id=call.call_id)

    def _repair(self, content: str) -> Optional[ToolCallRequest]:
        if self._repair_mode is RepairMode.OFF or not looks_like_tool_call(content):
            return None

        repaired = repair_tool_call(content)
        if repaired is None:
            self._observer.on_warning("Detected a potential tool call in the text response, but could not recover it.")
            return None

        if self._repair_mode is RepairMode.ADVISORY:
            self._observer.on_warning(f"Detected a malformed '{repaired.name}' call in the text response (not executed).")
            return None

        self._observer.on_warning(f"Detected and fixed a malformed '{repaired.name}' call.")
        return repaired

    @staticmethod
    def _with_unique_ids(calls: List[ToolCallRequest]) -> List[ToolCallRequest]:
        """Some local backends label every call of a batch alike; results are bound by id."""
        seen = set()
        unique = []
        for call in calls:
            if not call.call_id or call.call_id in seen:
                call = dataclasses.replace(call, call_id=new_call_id())
            seen.add(call.call_id)
            unique.append(call)
        return unique

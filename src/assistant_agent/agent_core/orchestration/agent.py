"""The human-facing loop around the turn orchestrator."""

import os
from typing import Optional, Protocol

from ..logger import get_logger
from .commands import CommandKind, change_directory, parse_local_command
from .observer import NullObserver, TurnObserver
from .orchestrator import TurnOrchestrator, TurnOutcome

logger = get_logger(__name__)

DEFAULT_NEXT_PROMPT = "Please ask your next question (or type 'exit' to stop): "


class PromptReader(Protocol):
    """Source of human input. Owns the input stream for the whole session."""

    async def read(self, prompt: str) -> Optional[str]:
        """Return the next line, or None at end of input."""
        ...

    def close(self) -> None:
        ...


class AssistantAgent:
    """
    Runs turns until the session terminates.

    Local inputs (``exit``/``quit``, ``cd <path>``, blank lines) are handled here and
    never reach the model. Input is only read between turns, never while the model
    or a tool is running.
    """

    def __init__(
        self,
        orchestrator: TurnOrchestrator,
        reader: PromptReader,
        *,
        observer: Optional[TurnObserver] = None,
        cwd_context: bool = True,
        next_prompt: str = DEFAULT_NEXT_PROMPT,
    ) -> None:
        self.orchestrator = orchestrator
        self._reader = reader
        self._observer: TurnObserver = observer or NullObserver()
        self._cwd_context = cwd_context
        self._next_prompt = next_prompt
        self.last_outcome: Optional[TurnOutcome] = None

    @property
    def session(self):
        return self.orchestrator.session

    async def run(self, initial_prompt: Optional[str] = None) -> int:
        """Run the conversation.

        Args:
            initial_prompt: First prompt. When None, the human is asked for one.

        Returns:
            Process exit code.
        """
        prompt = initial_prompt.strip() if initial_prompt else None
        try:
            while not self.session.terminated:
                if not prompt:
                    prompt = await self._read_prompt()
                    if prompt is None:
                        self.session.terminate()
                        break
                self.last_outcome = await self.orchestrator.run_turn(self._with_context(prompt))
                prompt = None
        finally:
            self._reader.close()
        return 0

    async def _read_prompt(self) -> Optional[str]:
        """Read until a line that should go to the model. None means the session should end."""
        while True:
            line = await self._reader.read(self._next_prompt)
            if line is None:
                return None

            command = parse_local_command(line)
            if command.kind is CommandKind.BLANK:
                continue
            if command.kind is CommandKind.EXIT:
                logger.info("Session ended by the user.")
                return None
            if command.kind is CommandKind.CHANGE_DIRECTORY:
                try:
                    cwd = change_directory(command.argument)
                except OSError as exc:
                    self._observer.on_warning(f"cd: {command.argument}: {exc.strerror or exc}")
                else:
                    self._observer.on_notice(f"Current directory: {cwd}")
                continue
            return command.argument

    def _with_context(self, prompt: str) -> str:
        if not self._cwd_context:
            return prompt
        return f"[cwd: {os.getcwd()}] {prompt}"

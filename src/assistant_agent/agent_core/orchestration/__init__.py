"""Turn orchestration and the human-facing agent loop."""

from .orchestrator import TurnOrchestrator, TurnOutcome, TurnState, RepairMode
from .agent import AssistantAgent, PromptReader
from .observer import TurnObserver, NullObserver
from .commands import CommandKind, LocalCommand, parse_local_command, change_directory

__all__ = [
    "TurnOrchestrator",
    "TurnOutcome",
    "TurnState",
    "RepairMode",
    "AssistantAgent",
    "PromptReader",
    "TurnObserver",
    "NullObserver",
    "CommandKind",
    "LocalCommand",
    "parse_local_command",
    "change_directory",
]

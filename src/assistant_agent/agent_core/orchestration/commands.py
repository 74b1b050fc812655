"""Inputs the agent handles locally instead of forwarding them to the model."""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CommandKind(str, Enum):
    EXIT = "exit"
    CHANGE_DIRECTORY = "cd"
    BLANK = "blank"
    PROMPT = "prompt"


@dataclass(frozen=True)
class LocalCommand:
    kind: CommandKind
    argument: str = ""


def parse_local_command(line: Optional[str]) -> LocalCommand:
    """Classify one line of human input.

    ``exit``, ``quit`` and ``TERMINATE`` end the session, ``cd [path]`` changes the
    working directory, blank lines are ignored; anything else is a prompt.
    """
    text = (line or "").strip()
    if not text:
        return LocalCommand(CommandKind.BLANK)

    lowered = text.lower()
    if lowered in ("exit", "quit", "terminate"):
        return LocalCommand(CommandKind.EXIT)
    if lowered == "cd" or lowered.startswith("cd "):
        return LocalCommand(CommandKind.CHANGE_DIRECTORY, text[2:].strip())
    return LocalCommand(CommandKind.PROMPT, text)


def change_directory(path: str) -> str:
    """Change the process working directory. ``cd`` without a path goes home.

    Returns:
        The new working directory.

    Raises:
        OSError: If the directory does not exist or cannot be entered.
    """
    target = os.path.expanduser(path.strip("\"'") or "~")
    os.chdir(target)
    return os.getcwd()

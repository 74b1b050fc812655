"""File-system tool: read, write and delete files, manage and list directories."""

import os
import shutil
from pathlib import Path
from typing import Annotated, Literal, Optional

from pydantic import Field

from ..agent_core.exceptions import ToolExecutionError
from ..agent_core.logger import get_logger

logger = get_logger(__name__)

CWD_PLACEHOLDER = "<current working directory>"

FileOperation = Literal[
    "read",
    "create",
    "update",
    "delete",
    "createDirectory",
    "deleteDirectory",
    "listDirectories",
]


def resolve_path(raw_path: str) -> Path:
    """Absolute path for a model-supplied path, with the cwd placeholder expanded."""
    if CWD_PLACEHOLDER in raw_path:
        raw_path = raw_path.replace(CWD_PLACEHOLDER, os.getcwd())
    return Path(raw_path).expanduser().resolve()


def file_system_tool(
    operation: Annotated[
        FileOperation,
        Field(
            description=(
                "read: return the file content. create/update: write 'content' to the file. "
                "delete: remove the file. createDirectory/deleteDirectory: create or recursively remove "
                "a directory. listDirectories: list the sub-directories of 'filePath'."
            )
        ),
    ],
    filePath: Annotated[str, Field(description="Absolute or relative path of the file or directory.")],
    content: Annotated[Optional[str], Field(description="Text to write for create and update.")] = None,
) -> str:
    """Read, create, update and delete files, and create, delete or list directories."""
    path = resolve_path(filePath)
    logger.debug("fileSystemTool %s on %s", operation, path)

    try:
        if operation == "read":
            return f"File content: {path.read_text(encoding='utf-8')}"

        if operation in ("create", "update"):
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content or "", encoding="utf-8")
            return f"File {path} {'created' if operation == 'create' else 'updated'}."

        if operation == "delete":
            path.unlink()
            return f"File {path} deleted."

        if operation == "createDirectory":
            path.mkdir(parents=True, exist_ok=True)
            return f"Directory {path} created."

        if operation == "deleteDirectory":
            if path.exists():
                shutil.rmtree(path)
            return f"Directory {path} deleted."

        if operation == "listDirectories":
            directories = sorted(entry.name for entry in path.iterdir() if entry.is_dir())
            return f"Directories in {path}: {', '.join(directories)}"
    except (OSError, UnicodeDecodeError) as exc:
        reason = getattr(exc, "strerror", None) or str(exc)
        raise ToolExecutionError(f'Error during "{operation}" on {path}: {reason}') from exc

    raise ToolExecutionError(f"Invalid operation '{operation}'.")

"""Shell tool: run one command in the current working directory."""

import asyncio
import json
import os
from typing import Annotated, Optional

from pydantic import Field

from ..agent_core.exceptions import ToolExecutionError
from ..agent_core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SHELL_TIMEOUT = 30.0
MAX_OUTPUT_CHARS = 20000


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + f"\n... [truncated {len(text) - limit} characters]"


class ShellExecutor:
    """Runs shell commands with a bounded runtime.

    The process inherits the agent's working directory at the time of the call,
    so a ``cd`` typed by the human affects later commands.
    """

    def __init__(self, default_timeout: float = DEFAULT_SHELL_TIMEOUT, max_output_chars: int = MAX_OUTPUT_CHARS):
        if default_timeout <= 0:
            raise ValueError("default_timeout must be positive.")
        self.default_timeout = default_timeout
        self.max_output_chars = max_output_chars

    async def execute(
        self,
        command: Annotated[str, Field(description="The shell command to execute.")],
        timeout: Annotated[
            Optional[float], Field(description="Maximum runtime in seconds. Defaults to 30 seconds.")
        ] = None,
    ) -> str:
        """Execute a shell command and return its standard output, standard error and exit code."""
        if not command.strip():
            raise ToolExecutionError("The 'command' key must be a non-empty string.")
        limit = self.default_timeout if timeout is None else timeout
        if limit <= 0:
            raise ValueError("timeout must be a positive number of seconds.")

        logger.info("Running shell command: %s", command)
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=os.getcwd(),
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=limit)
        except asyncio.TimeoutError:
            raise ToolExecutionError(f'Command "{command}" timed out after {limit:g} seconds.')
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()

        result = {
            "stdout": _truncate(stdout.decode("utf-8", errors="replace"), self.max_output_chars),
            "stderr": _truncate(stderr.decode("utf-8", errors="replace"), self.max_output_chars),
            "exit_code": process.returncode,
        }
        if process.returncode != 0:
            logger.debug("Command exited with %s: %s", process.returncode, command)
        return json.dumps(result, ensure_ascii=False)

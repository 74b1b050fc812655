import json
import sys
from pathlib import Path

import pytest

from assistant_agent.agent_core import ToolCallRequest, ToolDispatcher
from assistant_agent.agent_core.exceptions import ToolExecutionError
from assistant_agent.tools import ShellExecutor, build_default_registry

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell commands")


@pytest.mark.asyncio
async def test_execute_captures_output() -> None:
    result = json.loads(await ShellExecutor().execute("echo hello && echo oops 1>&2"))

    assert result == {"stdout": "hello\n", "stderr": "oops\n", "exit_code": 0}


@pytest.mark.asyncio
async def test_non_zero_exit_is_a_result() -> None:
    result = json.loads(await ShellExecutor().execute("exit 3"))

    assert result["exit_code"] == 3


@pytest.mark.asyncio
async def test_runs_in_current_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    result = json.loads(await ShellExecutor().execute("pwd"))

    assert Path(result["stdout"].strip()).resolve() == tmp_path.resolve()


@pytest.mark.asyncio
async def test_timeout_kills_command() -> None:
    with pytest.raises(ToolExecutionError, match=r'Command "sleep 5" timed out after 0.2 seconds.'):
        await ShellExecutor().execute("sleep 5", timeout=0.2)


@pytest.mark.asyncio
async def test_default_timeout_applies() -> None:
    with pytest.raises(ToolExecutionError, match="timed out after 0.2 seconds"):
        await ShellExecutor(default_timeout=0.2).execute("sleep 5")


@pytest.mark.asyncio
async def test_invalid_timeout() -> None:
    with pytest.raises(ValueError):
        await ShellExecutor().execute("echo hi", timeout=0)


@pytest.mark.asyncio
async def test_blank_command() -> None:
    with pytest.raises(ToolExecutionError, match="non-empty"):
        await ShellExecutor().execute("   ")


@pytest.mark.asyncio
async def test_output_is_truncated() -> None:
    result = json.loads(await ShellExecutor(max_output_chars=10).execute("printf '%0100d' 0"))

    assert result["stdout"].startswith("0" * 10)
    assert "truncated 90 characters" in result["stdout"]


@pytest.mark.asyncio
async def test_shell_tool_through_dispatcher() -> None:
    dispatcher = ToolDispatcher(build_default_registry(shell_timeout=5))

    result = await dispatcher.dispatch(
        ToolCallRequest(name="bashExecutorTool", arguments='{"command": "echo dispatched"}', call_id="c1")
    )
    assert json.loads(result.response["result"])["stdout"] == "dispatched\n"

    timed_out = await dispatcher.dispatch(
        ToolCallRequest(name="bashExecutorTool", arguments='{"command": "sleep 5", "timeout": 0.1}', call_id="c2")
    )
    assert timed_out.response == {"error": 'Command "sleep 5" timed out after 0.1 seconds.'}


def test_default_timeout_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ShellExecutor(default_timeout=0)

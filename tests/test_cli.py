import asyncio
import io
from typing import Any, Iterator, Optional
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from prompt_toolkit import PromptSession
from prompt_toolkit.input import PipeInput, create_pipe_input
from prompt_toolkit.output import DummyOutput
from rich.console import Console

from assistant_agent import cli
from assistant_agent.agent_core import ToolCallRequest, ToolCallResult, ToolDispatcher, ToolRegistry
from assistant_agent.agent_core.exceptions import GatewayError
from assistant_agent.agent_core.orchestration import TurnOrchestrator
from assistant_agent.agent_core.session import Session
from assistant_agent.config import AgentConfig

from conftest import FakeGateway


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("assistant_agent.config.load_dotenv", lambda *args, **kwargs: False)


def _console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, width=200)


def _output(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


def test_parser_options() -> None:
    args = cli.build_parser().parse_args(
        ["--api-type", "openai", "--input-mode", "never", "--repair-mode", "OFF", "--no-stream", "list", "files"]
    )
    overrides = cli._overrides(args)

    assert overrides["api_type"] == "openai"
    assert overrides["input_mode"] == "NEVER"
    assert overrides["repair_mode"] == "off"
    assert overrides["stream"] is False
    assert args.prompt == ["list", "files"]


def test_parser_leaves_unset_options_empty() -> None:
    overrides = cli._overrides(cli.build_parser().parse_args([]))
    assert all(value is None for value in overrides.values())


def test_hosted_without_key_exits_with_error(capsys: pytest.CaptureFixture) -> None:
    code = cli.main(["--api-type", "hosted"])

    assert code == 1
    assert "Configuration error" in capsys.readouterr().out


def test_unknown_api_type_exits_with_error() -> None:
    assert cli.main(["--api-type", "azure"]) == 1


def test_main_runs_agent_with_joined_prompt() -> None:
    agent = MagicMock()
    agent.run = AsyncMock(return_value=0)

    with patch.object(cli, "build_agent", return_value=agent) as build_agent:
        code = cli.main(["--model", "qwen2.5", "list", "the", "files"])

    assert code == 0
    config = build_agent.call_args.args[0]
    assert config.model == "qwen2.5"
    agent.run.assert_awaited_once_with("list the files")


def test_build_agent_wires_default_tools() -> None:
    config = AgentConfig.from_env(dotenv=False, max_tool_rounds=3)

    agent = cli.build_agent(config, _console())

    assert agent.orchestrator._max_tool_rounds == 3
    assert set(agent.session.toolset) == {
        "fileSystemTool",
        "fileSearchTool",
        "bashExecutorTool",
        "dependencyAnalysisTool",
    }
    assert agent.session.system_prompt == config.system_prompt


def test_console_observer_renders_turn() -> None:
    console = _console()
    observer = cli.ConsoleObserver(console)

    observer.on_content("Looking ")
    observer.on_content("[now]")
    observer.on_tool_call(ToolCallRequest(name="fileSystemTool", arguments='{"operation": "read"}', call_id="c"))
    observer.on_tool_result(ToolCallResult(name="fileSystemTool", response={"result": "ok"}, call_id="c"))
    observer.on_tool_result(ToolCallResult(name="bashExecutorTool", response={"error": "boom"}, call_id="d"))
    observer.on_warning("careful")
    observer.on_turn_complete("Looking [now]")

    output = _output(console)
    assert "Looking [now]" in output
    assert "Using tool: fileSystemTool (read)" in output
    assert "fileSystemTool completed" in output
    assert "bashExecutorTool: boom" in output
    assert "careful" in output


@pytest.mark.parametrize(
    "arguments, expected",
    [('{"command": "ls"}', "ls"), ({"operation": "grep"}, "grep"), ("not json", ""), (None, "")],
)
def test_describe_arguments(arguments: Optional[Any], expected: str) -> None:
    assert cli._describe_arguments(arguments) == expected


@pytest.fixture
def pipe_input() -> Iterator[PipeInput]:
    with create_pipe_input() as pipe:
        yield pipe


def _reader(pipe: PipeInput) -> cli.ConsolePromptReader:
    return cli.ConsolePromptReader(PromptSession(input=pipe, output=DummyOutput()))


@pytest.mark.asyncio
async def test_prompt_reader_returns_line(pipe_input: PipeInput) -> None:
    pipe_input.send_text("list the files\r")
    assert await _reader(pipe_input).read("> ") == "list the files"


@pytest.mark.asyncio
async def test_prompt_reader_handles_eof(pipe_input: PipeInput) -> None:
    reader = _reader(pipe_input)
    pipe_input.send_text("\x04")

    assert await reader.read("> ") is None
    reader.close()
    assert await reader.read("> ") is None


@pytest.mark.asyncio
async def test_pending_prompt_is_cancellable(pipe_input: PipeInput) -> None:
    task = asyncio.create_task(_reader(pipe_input).read("> "))
    await asyncio.sleep(0.05)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await asyncio.wait_for(task, timeout=2)
    assert task.cancelled()


@pytest.mark.asyncio
async def test_gateway_failure_is_printed() -> None:
    console = _console()
    observer = cli.ConsoleObserver(console)
    registry = ToolRegistry()
    orchestrator = TurnOrchestrator(
        Session("system", toolset=registry.tools),
        FakeGateway([GatewayError("connection refused")]),
        ToolDispatcher(registry),
        observer=observer,
    )

    await orchestrator.run_turn("hi")

    assert "Error during model call: connection refused" in _output(console)


def test_console_observer_ends_stream_before_error() -> None:
    console = _console()
    observer = cli.ConsoleObserver(console)

    observer.on_content("partial")
    observer.on_error("Error during model call: [timeout]")

    assert "partial\n✗ Error during model call: [timeout]" in _output(console)

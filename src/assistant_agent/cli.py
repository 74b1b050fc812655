"""Command-line entry point: an interactive tool-using assistant in the terminal."""

import argparse
import asyncio
import json
from typing import Any, Dict, List, Optional, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.styles import Style as PromptStyle
from rich.console import Console
from rich.markup import escape

from .agent_core.exceptions import ConfigurationError
from .agent_core.logger import get_logger, setup_logging
from .agent_core.orchestration import AssistantAgent, RepairMode, TurnOrchestrator
from .agent_core.session import InputMode, Session
from .agent_core.tools import ToolCallRequest, ToolCallResult, ToolDispatcher
from .config import AgentConfig
from .gateway import ApiType, configure
from .tools import build_default_registry

logger = get_logger(__name__)

PROMPT_STYLE = PromptStyle.from_dict({"prompt": "ansigreen bold"})


class ConsoleObserver:
    """Renders a turn on a rich console as it happens."""

    def __init__(self, console: Console):
        self.console = console
        self._streaming = False

    def on_content(self, text: str) -> None:
        if not self._streaming:
            self.console.print("\n[bold bright_blue]Assistant>[/bold bright_blue] ", end="")
            self._streaming = True
        self.console.print(text, end="", markup=False, highlight=False)

    def on_tool_call(self, request: ToolCallRequest) -> None:
        self._end_stream()
        operation = _describe_arguments(request.arguments)
        suffix = f" ({operation})" if operation else ""
        self.console.print(f"[bright_cyan]Using tool:[/bright_cyan] {escape(request.name + suffix)}", highlight=False)

    def on_tool_result(self, result: ToolCallResult) -> None:
        if result.is_error:
            error = escape(str(result.response["error"]))
            self.console.print(f"[red]✗ {escape(result.name)}: {error}[/red]", highlight=False)
        else:
            self.console.print(f"[green]✓ {escape(result.name)} completed[/green]")

    def on_warning(self, message: str) -> None:
        self._end_stream()
        self.console.print(f"[yellow]⚠ {escape(message)}[/yellow]", highlight=False)

    def on_notice(self, message: str) -> None:
        self._end_stream()
        self.console.print(f"[dim]{escape(message)}[/dim]", highlight=False)

    def on_error(self, message: str) -> None:
        self._end_stream()
        self.console.print(f"[bold red]✗ {escape(message)}[/bold red]", highlight=False)

    def on_turn_complete(self, final_content: str) -> None:
        self._end_stream()

    def _end_stream(self) -> None:
        if self._streaming:
            self.console.print()
            self._streaming = False


class ConsolePromptReader:
    """
    Reads the human's prompts on the event loop.

    A pending read is cancellable: Ctrl-C ends it without waiting for Enter.
    """

    def __init__(self, session: Optional[PromptSession] = None):
        self.session = session
        self.closed = False

    async def read(self, prompt: str) -> Optional[str]:
        if self.closed:
            return None
        if self.session is None:
            self.session = PromptSession(style=PROMPT_STYLE)
        try:
            return await self.session.prompt_async([("class:prompt", f"\n{prompt}")])
        except EOFError:
            return None

    def close(self) -> None:
        self.closed = True


def _describe_arguments(arguments: Any) -> str:
    if isinstance(arguments, str):
        try:
            arguments = json.loads(arguments)
        except json.JSONDecodeError:
            return ""
    if not isinstance(arguments, dict):
        return ""
    value = arguments.get("operation") or arguments.get("command") or ""
    return str(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assistant-agent",
        description="Conversational assistant that reads, searches and edits files and runs shell commands.",
    )
    parser.add_argument("prompt", nargs="*", help="Initial prompt. When omitted, you are asked for one.")
    parser.add_argument("--api-type", help="Backend dialect: hosted (openai) or local-compatible (ollama).")
    parser.add_argument("--model", help="Model name.")
    parser.add_argument("--base-url", help="Base URL of the backend.")
    parser.add_argument(
        "--input-mode",
        choices=[mode.value for mode in InputMode],
        type=str.upper,
        help="ALWAYS asks for a new prompt after each answer, NEVER ends after the first turn.",
    )
    parser.add_argument(
        "--repair-mode",
        choices=[mode.value for mode in RepairMode],
        type=str.lower,
        help="What to do with tool calls written as plain text.",
    )
    parser.add_argument("--max-tool-rounds", type=int, help="Stop a turn after this many tool rounds.")
    parser.add_argument("--no-stream", action="store_true", help="Wait for whole completions instead of streaming.")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    return parser


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "api_type": args.api_type,
        "model": args.model,
        "base_url": args.base_url,
        "input_mode": args.input_mode,
        "repair_mode": args.repair_mode,
        "max_tool_rounds": args.max_tool_rounds,
        "stream": False if args.no_stream else None,
        "log_level": args.log_level,
    }


def build_agent(config: AgentConfig, console: Console) -> AssistantAgent:
    """Wire the gateway, tools, session and orchestrator for ``config``.

    Raises:
        ConfigurationError: If the backend cannot be configured.
    """
    gateway = configure(
        config.api_type,
        credentials=config.api_key,
        base_endpoint=config.base_url,
        model_name=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        stream=config.stream,
    )
    registry = build_default_registry(shell_timeout=config.shell_timeout)
    dispatcher = ToolDispatcher(registry, tool_timeout=config.tool_timeout)
    session = Session(config.system_prompt, toolset=registry.tools, input_mode=config.input_mode)
    observer = ConsoleObserver(console)
    orchestrator = TurnOrchestrator(
        session,
        gateway,
        dispatcher,
        observer=observer,
        repair_mode=config.repair_mode,
        max_tool_rounds=config.max_tool_rounds,
    )
    return AssistantAgent(
        orchestrator,
        ConsolePromptReader(),
        observer=observer,
        cwd_context=config.cwd_context,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console()

    try:
        config = AgentConfig.from_env(**_overrides(args))
        setup_logging(config.log_level)
        logger.debug("Configuration: %s", config.model_dump(exclude={"api_key", "system_prompt"}))
        agent = build_agent(config, console)
    except ConfigurationError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(exc))}", highlight=False)
        return 1

    backend = "hosted" if config.api_type is ApiType.HOSTED else "local-compatible"
    console.print(f"[dim]Model {config.model} via the {backend} API. Type 'exit' to stop.[/dim]")

    prompt: List[str] = args.prompt
    try:
        return asyncio.run(agent.run(" ".join(prompt) or None))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        return 130

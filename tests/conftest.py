from typing import Annotated, Any, Dict, List, Optional, Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import AsyncOpenAI
from pydantic import Field

from assistant_agent.agent_core import (
    BaseMessage,
    ContentDelta,
    ToolCallEvent,
    ToolCallRequest,
    ToolCallResult,
    ToolDispatcher,
    ToolRegistry,
)
from assistant_agent.agent_core.tools.models import TOOL_NAME_PATTERN

_ENV_KEYS = [
    "AGENT_API_TYPE",
    "AGENT_MODEL",
    "OPENAI_API_KEY",
    "AGENT_BASE_URL",
    "AGENT_INPUT_MODE",
    "AGENT_REPAIR_MODE",
    "AGENT_MAX_TOOL_ROUNDS",
    "AGENT_TOOL_TIMEOUT",
    "AGENT_SHELL_TIMEOUT",
    "AGENT_STREAM",
    "AGENT_CWD_CONTEXT",
    "AGENT_TEMPERATURE",
    "AGENT_MAX_TOKENS",
    "AGENT_LOG_LEVEL",
    "AGENT_SYSTEM_PROMPT",
]


class FakeGateway:
    """Scripted gateway: each call to ``complete`` replays the next script entry.

    An entry is either a list of events or an exception to raise.
    """

    def __init__(self, script: Sequence[Any], strict_names: bool = False):
        self.script = list(script)
        self.requests: List[List[BaseMessage]] = []
        self.tools_seen: List[Optional[List[Dict[str, Any]]]] = []
        self.strict_names = strict_names

    def accepts_tool_name(self, name: str) -> bool:
        if not self.strict_names:
            return True
        return "." not in name and bool(TOOL_NAME_PATTERN.match(name))

    async def complete(self, messages, tools=None):
        self.requests.append(list(messages))
        self.tools_seen.append(tools)
        if not self.script:
            raise AssertionError("FakeGateway ran out of scripted responses.")
        entry = self.script.pop(0)
        if isinstance(entry, Exception):
            raise entry
        for event in entry:
            yield event


class RecordingObserver:
    def __init__(self) -> None:
        self.content: List[str] = []
        self.tool_calls: List[ToolCallRequest] = []
        self.tool_results: List[ToolCallResult] = []
        self.warnings: List[str] = []
        self.notices: List[str] = []
        self.errors: List[str] = []
        self.completed: List[str] = []

    def on_content(self, text: str) -> None:
        self.content.append(text)

    def on_tool_call(self, request: ToolCallRequest) -> None:
        self.tool_calls.append(request)

    def on_tool_result(self, result: ToolCallResult) -> None:
        self.tool_results.append(result)

    def on_warning(self, message: str) -> None:
        self.warnings.append(message)

    def on_notice(self, message: str) -> None:
        self.notices.append(message)

    def on_error(self, message: str) -> None:
        self.errors.append(message)

    def on_turn_complete(self, final_content: str) -> None:
        self.completed.append(final_content)


def text(content: str) -> List[Any]:
    return [ContentDelta(content)]


def call(name: str, arguments: Any, call_id: Optional[str] = "call_1") -> ToolCallEvent:
    return ToolCallEvent(ToolCallRequest(name=name, arguments=arguments, call_id=call_id))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def echo_registry() -> ToolRegistry:
    registry = ToolRegistry()

    @registry.tool
    def echo(message: Annotated[str, Field(description="Text to echo back.")]) -> str:
        """Echo the message."""
        return f"echo: {message}"

    @registry.tool
    def add(
        a: Annotated[int, Field(description="First operand.")],
        b: Annotated[int, Field(description="Second operand.")] = 1,
    ) -> int:
        """Add two integers."""
        return a + b

    return registry


@pytest.fixture
def dispatcher(echo_registry: ToolRegistry) -> ToolDispatcher:
    return ToolDispatcher(echo_registry)


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def mock_openai_client() -> Any:
    client = MagicMock(spec=AsyncOpenAI)
    client.chat = MagicMock()
    client.chat.completions = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client

"""Runtime configuration, read from the environment and an optional ``.env`` file."""

import os
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .agent_core.exceptions import ConfigurationError
from .agent_core.orchestration import RepairMode
from .agent_core.session import InputMode
from .gateway import DEFAULT_MODEL, ApiType

DEFAULT_SYSTEM_PROMPT = """You are a helpful AI assistant working in the user's terminal.
Solve tasks using your coding and language skills and the tools you have access to:
- fileSystemTool: read, create, update and delete files, create and delete directories, list sub-directories.
- fileSearchTool: find files by name, search file contents, or explore the structure of a project.
- bashExecutorTool: run a shell command in the current working directory.
- dependencyAnalysisTool: list the dependencies a project declares in its manifest (package.json, requirements.txt, ...).
Each user message starts with the current working directory in the form [cwd: <path>].
Solve the task step by step. Check each tool result and fix errors before moving on.
When you find an answer, verify it carefully.
Reply "TERMINATE" in the end when everything is done."""

_ENV_KEYS = {
    "api_type": "AGENT_API_TYPE",
    "model": "AGENT_MODEL",
    "api_key": "OPENAI_API_KEY",
    "base_url": "AGENT_BASE_URL",
    "input_mode": "AGENT_INPUT_MODE",
    "repair_mode": "AGENT_REPAIR_MODE",
    "max_tool_rounds": "AGENT_MAX_TOOL_ROUNDS",
    "tool_timeout": "AGENT_TOOL_TIMEOUT",
    "shell_timeout": "AGENT_SHELL_TIMEOUT",
    "stream": "AGENT_STREAM",
    "cwd_context": "AGENT_CWD_CONTEXT",
    "temperature": "AGENT_TEMPERATURE",
    "max_tokens": "AGENT_MAX_TOKENS",
    "log_level": "AGENT_LOG_LEVEL",
    "system_prompt": "AGENT_SYSTEM_PROMPT",
}


class AgentConfig(BaseModel):
    """Settings for one agent process."""

    api_type: ApiType = ApiType.LOCAL_COMPATIBLE
    model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    input_mode: InputMode = InputMode.ALWAYS
    repair_mode: RepairMode = RepairMode.DISPATCH
    max_tool_rounds: Optional[int] = Field(default=None, ge=1)
    tool_timeout: float = Field(default=180.0, gt=0)
    shell_timeout: float = Field(default=30.0, gt=0)
    stream: bool = True
    cwd_context: bool = True
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    log_level: str = "WARNING"
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    @field_validator("api_type", mode="before")
    @classmethod
    def _parse_api_type(cls, value: Any) -> ApiType:
        return ApiType.parse(value)

    @field_validator("input_mode", mode="before")
    @classmethod
    def _upper_input_mode(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @field_validator("repair_mode", mode="before")
    @classmethod
    def _lower_repair_mode(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level '{value}'.")
        return level

    @classmethod
    def from_env(cls, dotenv: bool = True, **overrides: Any) -> "AgentConfig":
        """
        Build a configuration from ``AGENT_*`` variables.

        Args:
            dotenv: Load a ``.env`` file first, without overriding variables already set.
            **overrides: Values that win over the environment, such as CLI options.
                ``None`` values are ignored.

        Raises:
            ConfigurationError: If a value is invalid.
        """
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        values: Dict[str, Any] = {}
        for field_name, env_key in _ENV_KEYS.items():
            raw = os.getenv(env_key)
            if raw is not None and raw.strip() != "":
                values[field_name] = raw.strip() if field_name != "system_prompt" else raw
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.build(**values)

    @classmethod
    def build(cls, **values: Any) -> "AgentConfig":
        """Validate ``values`` into a configuration, raising ConfigurationError on bad input."""
        try:
            return cls(**values)
        except ConfigurationError:
            raise
        except ValidationError as exc:
            error = exc.errors()[0]
            location = ".".join(str(part) for part in error.get("loc", ()))
            raise ConfigurationError(f"Invalid configuration for '{location}': {error['msg']}") from exc

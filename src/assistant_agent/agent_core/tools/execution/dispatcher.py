"""Validates tool calls against the registry and executes them."""

from __future__ import annotations

import asyncio
import inspect
import json
from typing import Any, Callable, Dict

from pydantic import ValidationError

from ...exceptions import ToolExecutionError
from ...logger import get_logger
from ..models import ToolCallRequest, ToolCallResult, ToolDefinition
from ..registry import ToolRegistry
from ..schema import SchemaValidator

logger = get_logger(__name__)


class ToolDispatcher:
    """Turns a ``ToolCallRequest`` into a ``ToolCallResult``.

    ``dispatch`` never raises: unknown tools, undecodable or incomplete arguments and
    executor failures all come back as ``{"error": ...}`` results, so the model reads
    them as conversation content and can correct itself on the next round.
    """

    # Exceptions whose message is safe and useful to return to the model verbatim.
    RECOVERABLE_ERRORS = (
        ToolExecutionError,
        OSError,
        ValueError,
        TypeError,
        UnicodeError,
    )

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        tool_timeout: float = 180.0,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Tool registry used to resolve tool definitions.
            tool_timeout: Upper bound in seconds for a single executor call.
        """
        self._registry = registry
        self._tool_timeout = tool_timeout

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def dispatch(self, tool_call: ToolCallRequest) -> ToolCallResult:
        """Validate and execute a single tool call.

        Args:
            tool_call: The tool call request containing name, ID, and arguments.

        Returns:
            The result of the tool execution, including any errors.
        """
        logger.debug(f"Handling tool call: {tool_call.name} (ID: {tool_call.call_id})")

        tool_def = self._registry.get(tool_call.name)
        if tool_def is None:
            available = ", ".join(self._registry.tool_names) or "none"
            msg = f"Unknown tool '{tool_call.name}'. Available tools: {available}."
            logger.warning(msg)
            return self._error(tool_call, msg)

        try:
            function_args = self._normalize_function_args(tool_call.name, tool_call.arguments)
        except ToolExecutionError as exc:
            logger.warning(f"Argument decoding failed for '{tool_call.name}': {exc}")
            return self._error(tool_call, str(exc))

        problem = self._validate(tool_def, function_args)
        if isinstance(problem, str):
            logger.warning(f"Validation error for '{tool_call.name}': {problem}")
            return self._error(tool_call, problem)
        function_args = problem

        try:
            logger.info(f"Executing tool '{tool_call.name}'...")
            function_result = await self._execute_tool(tool_def.func, function_args)
            logger.info(f"Tool '{tool_call.name}' executed successfully.")
        except self.RECOVERABLE_ERRORS as exc:
            msg = str(exc) or type(exc).__name__
            logger.warning(f"Recoverable error in '{tool_call.name}': {msg} ({type(exc).__name__})")
            return self._error(tool_call, msg)
        except Exception as exc:
            logger.error(f"Unexpected error executing tool '{tool_call.name}': {exc}", exc_info=True)
            return self._error(
                tool_call,
                f"An internal error occurred while executing '{tool_call.name}' ({type(exc).__name__}).",
            )

        return ToolCallResult(name=tool_call.name, response={"result": function_result}, call_id=tool_call.call_id)

    @staticmethod
    def _validate(tool_def: ToolDefinition, function_args: Dict[str, Any]) -> Dict[str, Any] | str:
        """Check arguments against the tool contract.

        Returns:
            The validated arguments, or an error message.
        """
        missing = SchemaValidator.missing_required(tool_def.parameters, function_args)
        if missing:
            return f"Missing required argument(s) for tool '{tool_def.name}': {', '.join(missing)}."

        if tool_def.args_model is None:
            type_errors = SchemaValidator.type_errors(tool_def.parameters, function_args)
            if type_errors:
                return f"Argument validation failed: {'; '.join(type_errors)}."
            properties = tool_def.parameters.get("properties") if isinstance(tool_def.parameters, dict) else None
            if properties:
                return {key: value for key, value in function_args.items() if key in properties}
            return function_args

        try:
            validated = tool_def.args_model(**function_args)
        except ValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}" for err in exc.errors()
            )
            return f"Argument validation failed: {details}"
        return validated.model_dump()

    def _normalize_function_args(self, tool_name: str, raw_args: Any) -> Dict[str, Any]:
        """Normalize tool arguments into a dictionary.

        Handles JSON strings, dictionaries, or None values.

        Raises:
            ToolExecutionError: If arguments cannot be parsed or are not a JSON object.
        """
        if raw_args is None or raw_args == "":
            return {}

        if isinstance(raw_args, dict):
            return raw_args

        if isinstance(raw_args, str):
            try:
                parsed = json.loads(raw_args)
            except json.JSONDecodeError as exc:
                raise ToolExecutionError(self._argument_error(tool_name, exc)) from exc

            if parsed is None:
                return {}

            if not isinstance(parsed, dict):
                error = ValueError("Function arguments must decode to a JSON object.")
                raise ToolExecutionError(self._argument_error(tool_name, error))

            return parsed

        try:
            return dict(raw_args)
        except (TypeError, ValueError) as exc:
            raise ToolExecutionError(self._argument_error(tool_name, exc)) from exc

    async def _execute_tool(self, tool_function: Callable[..., Any], function_args: Dict[str, Any]) -> Any:
        """Execute the tool function, handling async/sync and timeouts.

        Raises:
            ToolExecutionError: If execution times out.
        """
        try:
            if inspect.iscoroutinefunction(tool_function):
                return await asyncio.wait_for(tool_function(**function_args), timeout=self._tool_timeout)

            return await asyncio.wait_for(
                asyncio.to_thread(tool_function, **function_args),
                timeout=self._tool_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ToolExecutionError(f"Tool execution timed out after {self._tool_timeout} seconds.") from exc

    @staticmethod
    def _error(tool_call: ToolCallRequest, message: str) -> ToolCallResult:
        return ToolCallResult(name=tool_call.name, response={"error": message}, call_id=tool_call.call_id)

    @staticmethod
    def _argument_error(tool_name: str, error: Exception) -> str:
        return f"Failed to parse arguments for tool '{tool_name}': {error}"

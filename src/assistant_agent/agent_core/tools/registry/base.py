"""Tool registry: tool declarations offered to the model and the executors behind them."""

import inspect
from typing import Callable, Dict, Any, List, Union, Optional, cast

import jsonref  # type: ignore
from pydantic import ValidationError, create_model

from ..models import ToolDefinition
from ..schema import SchemaValidator, ToolParameterFactory
from ...exceptions import DuplicateToolName, ToolNotFoundError, ToolRegistrationError, ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)


class ToolRegistry:
    """
    A central registry to manage and access all tools available to the model.

    This class holds the function declarations to be sent to the model and
    maps tool names to their actual Python implementations. It is pure data:
    executing a call is the dispatcher's job.
    """

    def __init__(self) -> None:
        """Initialize the ToolRegistry."""
        self.tools: Dict[str, ToolDefinition] = {}

    def register(
        self,
        name_or_tool: Union[str, ToolDefinition, Callable],
        description: Optional[str] = None,
        func: Optional[Callable] = None,
        parameters: Optional[Any] = None,
    ) -> ToolDefinition:
        """
        Register a new tool.

        A tool can be registered by providing a `ToolDefinition` object directly,
        by providing the individual components (name, description, function, parameters),
        or by providing a function (Callable) to automatically generate the definition.

        Args:
            name_or_tool: Either a `ToolDefinition` object, the name of the tool (str), or a Callable.
            description: A brief description of what the tool does. Required if `name_or_tool` is a string and parameters are provided.
            func: The callable implementing the tool's logic. Required if `name_or_tool` is a string.
            parameters: A JSON schema for the tool's input. If None, it is inferred from `func`.

        Returns:
            The registered definition.

        Raises:
            DuplicateToolName: If a tool with the same name is already registered.
            ToolRegistrationError: If individual arguments are provided but some are missing.
            ToolValidationError: If the name or the executor signature is invalid.
        """
        try:
            if isinstance(name_or_tool, ToolDefinition):
                tool = name_or_tool
            elif callable(name_or_tool):
                tool = self._generate_tool_definition(name_or_tool, description=description)
            else:
                if func is None:
                    raise ToolRegistrationError("If passing name as string, func is required.")

                if parameters is None:
                    tool = self._generate_tool_definition(func, name=name_or_tool, description=description)
                else:
                    if description is None:
                        raise ToolRegistrationError("If passing name and parameters, description is required.")
                    tool = ToolDefinition(name=name_or_tool, description=description, func=func, parameters=parameters)
        except ValidationError as exc:
            msg = f"Invalid tool definition: {exc.errors()[0]['msg']}"
            logger.error(msg)
            raise ToolValidationError(msg) from exc

        if tool.name in self.tools:
            msg = f"Tool '{tool.name}' is already registered."
            logger.error(msg)
            raise DuplicateToolName(msg)

        self.tools[tool.name] = tool
        logger.info(f"Successfully registered tool: '{tool.name}'")
        return tool

    def unregister(self, tool_name: str) -> None:
        """Unregister a tool from the registry.

        Raises:
            ToolNotFoundError: If the tool does not exist in the registry.
        """
        if tool_name not in self.tools:
            raise ToolNotFoundError(f"Tool '{tool_name}' not found in the registry.")
        del self.tools[tool_name]
        logger.info(f"Successfully unregistered tool: '{tool_name}'")

    def tool(self, func: Callable) -> Callable:
        """A decorator to turn a function into a tool.

        Args:
            func: The function to decorate.

        Returns:
            The original function, after registering it as a tool.
        """
        self.register(func)
        return func

    def get(self, tool_name: str) -> Optional[ToolDefinition]:
        return self.tools.get(tool_name)

    @property
    def tool_names(self) -> List[str]:
        return list(self.tools)

    @property
    def tool_object(self) -> List[Dict[str, Any]] | None:
        """
        Tool declarations in the OpenAI function-tool format, which both backend
        dialects accept.

        Returns:
            A list of tool dictionaries, or None if no tools are registered.
        """
        if not self.tools:
            return None

        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters or {"type": "object", "properties": {}},
                },
            }
            for tool in self.tools.values()
        ]

    @property
    def implementations(self) -> Dict[str, Callable]:
        """Returns a dictionary mapping tool names to their callables."""
        return {name: tool.func for name, tool in self.tools.items()}

    def _generate_tool_definition(
        self, func: Callable, name: Optional[str] = None, description: Optional[str] = None
    ) -> ToolDefinition:
        """Generate a ToolDefinition from an executor's signature and docstring.

        Raises:
            ToolValidationError: If the function is missing a docstring or parameter descriptions.
        """
        tool_name = name or func.__name__
        if description is None:
            description = self._get_docstring_from_func(func, tool_name)

        fields = self._build_fields(inspect.signature(func), tool_name)

        # create_model expects **field_definitions: Any
        args_model = create_model(f"{tool_name}Params", **cast(Dict[str, Any], fields))
        raw_schema = args_model.model_json_schema()
        SchemaValidator.assert_no_recursive_refs(raw_schema)

        # proxies=False returns a plain dict instead of JsonRef objects
        parameters_schema = jsonref.replace_refs(raw_schema, proxies=False)
        parameters_schema = SchemaValidator.sanitize_schema(parameters_schema)

        return ToolDefinition(
            name=tool_name,
            description=description,
            func=func,
            parameters=parameters_schema,
            args_model=args_model,
        )

    @staticmethod
    def _get_docstring_from_func(func: Callable, tool_name: str) -> str:
        doc = inspect.getdoc(func)
        if not doc:
            msg = f"Tool '{tool_name}' missing docstring. LLMs need a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)
        return doc

    @staticmethod
    def _build_fields(signature: inspect.Signature, tool_name: str) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        for param_name, param in signature.parameters.items():
            if param_name == "self":
                continue
            ft = ToolParameterFactory.build_field_tuple(param_name=param_name, param=param, tool_name=tool_name)
            fields[param_name] = (ft.annotation, ft.field)
        return fields

"""Tool definition model shared by the registry and the dispatcher."""

from typing import Optional, Any, Callable, Type, List
from pydantic import BaseModel, field_validator
import re

TOOL_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


class ToolDefinition(BaseModel):
    """
    Represents the definition of a tool that can be offered to the model.

    Attributes:
        name: The unique name of the tool. Identifier-safe characters only, no dots.
        description: A brief description of what the tool does.
        func: The callable (sync or async) that implements the tool's logic.
        parameters: A JSON schema defining the input parameters for the tool's function.
        args_model: Optional Pydantic model used for validating and coercing arguments.
    """

    name: str
    description: str
    func: Callable
    parameters: Optional[Any] = None
    args_model: Optional[Type[BaseModel]] = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not TOOL_NAME_PATTERN.match(value):
            raise ValueError(
                f"Tool name '{value}' may only contain letters, digits, '_' and '-' (no dots or spaces)."
            )
        return value

    @property
    def required_arguments(self) -> List[str]:
        """Names of the arguments the schema marks as required."""
        if isinstance(self.parameters, dict):
            return list(self.parameters.get("required", []))
        return []

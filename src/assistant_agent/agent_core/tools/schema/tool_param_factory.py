"""Turns executor parameters into pydantic field definitions for schema generation."""

import inspect
from typing import Any, get_origin, Annotated, get_args
from pydantic import Field, BaseModel, ConfigDict
from pydantic.fields import FieldInfo

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)


class FieldTuple(BaseModel):
    """An ``(annotation, FieldInfo)`` pair as expected by pydantic's ``create_model``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    annotation: Any
    field: FieldInfo


class ToolParameterFactory:
    """Extracts and checks a single executor parameter for the generated args model."""

    @classmethod
    def build_field_tuple(cls, param_name: str, param: inspect.Parameter, tool_name: str) -> FieldTuple:
        """Creates the field definition for one executor parameter.

        Args:
            param_name: The name of the parameter, which is also the JSON key the model must send.
            param: The inspect.Parameter object.
            tool_name: The name of the tool for error reporting.

        Returns:
            A FieldTuple containing the type annotation and Pydantic Field configuration.
        """
        description = cls._extract_description(param.annotation, param_name, tool_name)
        default = ... if param.default is inspect.Parameter.empty else param.default
        return FieldTuple(annotation=param.annotation, field=Field(default=default, description=description))

    @staticmethod
    def _extract_description(annotation: Any, param_name: str, tool_name: str) -> str:
        """Every executor parameter is declared as ``Annotated[<type>, Field(description='...')]``.

        Raises:
            ToolValidationError: If the parameter is missing a Pydantic Field description.
        """
        if get_origin(annotation) is Annotated:
            for metadata in get_args(annotation)[1:]:
                if isinstance(metadata, FieldInfo) and metadata.description:
                    return metadata.description

        msg = (
            f"Parameter '{param_name}' in tool '{tool_name}' is missing a description.\n"
            f"Usage: {param_name}: Annotated[Type, Field(description='...')] = ..."
        )
        logger.error(msg)
        raise ToolValidationError(msg)

"""Validation and clean-up helpers for tool parameter schemas."""

from typing import Any, Dict, List, Mapping, Set

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_METADATA_KEYS = ("$defs", "$schema", "$id", "title", "definitions")

_JSON_TYPES: Dict[str, tuple] = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
    "array": (list,),
    "object": (dict,),
}


class SchemaValidator:
    """
    Helper class for validating tool schemas and the arguments sent against them.
    """

    @staticmethod
    def assert_no_recursive_refs(schema: Dict[str, Any]) -> None:
        """
        Walks the ``$ref`` graph of a schema and fails on cycles.

        Args:
            schema: The JSON schema to check.

        Raises:
            ToolValidationError: If a recursive reference is found.
        """
        defs = schema.get("$defs", {}) or schema.get("definitions", {})

        def walk(node: Any, seen: Set[str]) -> None:
            if isinstance(node, list):
                for item in node:
                    walk(item, seen)
                return
            if not isinstance(node, dict):
                return

            ref = node.get("$ref")
            if ref is None:
                for value in node.values():
                    walk(value, seen)
                return

            if ref in seen:
                msg = (
                    f"Recursive structure detected: {ref}. "
                    "Recursive structures are not allowed in tool inputs."
                )
                logger.error(msg)
                raise ToolValidationError(msg)

            # e.g. #/$defs/MyModel
            if ref.startswith("#"):
                target = ref.split("/")[-1]
                if target in defs:
                    walk(defs[target], seen | {ref})

        walk(schema, set())

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """
        Cleans up a generated schema before it is offered to the model.

        Removes $defs, $schema, $id and title, collapses ``Optional[X]`` (anyOf with null)
        to ``X`` and closes objects with ``additionalProperties: false``.

        Args:
            schema: The JSON schema to sanitize.

        Returns:
            The sanitized schema.
        """
        if not isinstance(schema, dict):
            return schema

        cleaned = {k: v for k, v in schema.items() if k not in _METADATA_KEYS}

        variants = cleaned.get("anyOf")
        if isinstance(variants, list):
            concrete = [v for v in variants if not (isinstance(v, dict) and v.get("type") == "null")]
            if len(concrete) == 1 and isinstance(concrete[0], dict):
                collapsed = dict(concrete[0])
                for key in ("description", "default"):
                    if key in cleaned:
                        collapsed[key] = cleaned[key]
                return SchemaValidator.sanitize_schema(collapsed)

        if cleaned.get("type") == "object":
            cleaned.setdefault("additionalProperties", False)

        for key, value in cleaned.items():
            if isinstance(value, dict):
                cleaned[key] = SchemaValidator.sanitize_schema(value)
            elif isinstance(value, list):
                cleaned[key] = [SchemaValidator.sanitize_schema(v) if isinstance(v, dict) else v for v in value]

        return cleaned

    @staticmethod
    def missing_required(schema: Any, arguments: Mapping[str, Any]) -> List[str]:
        """Return the required keys of ``schema`` that ``arguments`` does not provide.

        A key explicitly set to ``null`` counts as missing.
        """
        if not isinstance(schema, dict):
            return []
        return [key for key in schema.get("required", []) if arguments.get(key) is None]

    @staticmethod
    def type_errors(schema: Any, arguments: Mapping[str, Any]) -> List[str]:
        """Shallow type check of top-level arguments against declared JSON types.

        Used for tools registered with a hand-written schema and no args model.
        """
        if not isinstance(schema, dict):
            return []
        errors = []
        properties = schema.get("properties", {})
        for key, value in arguments.items():
            declared = properties.get(key, {}).get("type")
            if value is None or declared not in _JSON_TYPES:
                continue
            expected = _JSON_TYPES[declared]
            # bool is an int subclass; keep them apart
            if isinstance(value, bool) and bool not in expected:
                errors.append(f"'{key}' must be of type {declared}")
            elif not isinstance(value, expected):
                errors.append(f"'{key}' must be of type {declared}")
            elif "enum" in properties[key] and value not in properties[key]["enum"]:
                allowed = ", ".join(map(str, properties[key]["enum"]))
                errors.append(f"'{key}' must be one of: {allowed}")
        return errors

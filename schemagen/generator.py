"""
Output schema synthesis.

Derives JSON Schema for handler results from the result dataclasses
themselves. There are no hand-written schema files: add a field to a result
type and every schema that mentions it changes with it.

Compiled nodes are cached per type. A type that refers back to itself
(directly or through other types) gets a placeholder node at the point of
recursion instead of looping. Nodes that contain a placeholder are never
cached, so a type compiles to the same node whichever type is asked for first.
"""

import copy
import dataclasses
import datetime
import logging
import types
import typing
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from typing import Any, Literal, Union

from models import SchemaGenerationError, ValidationError
from schemagen.shapes import variant_table_for, variants_of

logger = logging.getLogger(__name__)

# Response metadata node; identical for every tool and operation.
OUTPUT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "path": {"type": "string"},
        "sessionId": {"type": "string"},
        "isSession": {"type": "boolean"},
    },
    "required": ["isSession"],
    "additionalProperties": False,
}

_SCALARS: dict[Any, dict[str, Any]] = {
    str: {"type": "string"},
    bool: {"type": "boolean"},
    int: {"type": "integer"},
    float: {"type": "number"},
    datetime.datetime: {"type": "string", "format": "date-time"},
    datetime.date: {"type": "string", "format": "date"},
}

_ARRAY_ORIGINS = (list, tuple, set, frozenset, Sequence)


def _name(tp: Any) -> str:
    return tp.__name__ if isinstance(tp, type) else str(tp).replace("typing.", "")


def _description(cls: type) -> str | None:
    """First docstring line, skipping the signature dataclasses invent."""
    doc = cls.__dict__.get("__doc__") or ""
    if not doc.strip() or doc.startswith(f"{cls.__name__}("):
        return None
    return doc.strip().splitlines()[0]


class OutputSchemaGenerator:
    """
    Compiles result types into JSON Schema nodes.

    Not thread-safe while compiling; build every schema at start-up, then
    share the generator read-only.
    """

    def __init__(self) -> None:
        self._cache: dict[type, dict[str, Any]] = {}
        self._in_progress: set[type] = set()
        self._placeholders = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def node_for(self, result_type: type) -> dict[str, Any]:
        """The schema node for one result type (no envelope)."""
        return copy.deepcopy(self._compile(result_type))

    def data_node(self, result_types: Iterable[type]) -> dict[str, Any]:
        """
        Schema node for the ``data`` member.

        One candidate yields its node directly; several yield a oneOf in
        the given order. Repeated candidates count once.

        Raises:
            ValidationError: If no candidate types are supplied
        """
        candidates = list(dict.fromkeys(result_types))
        if not candidates:
            raise ValidationError(
                "result_types",
                "At least one result type is required to generate an output schema",
            )
        if len(candidates) == 1:
            return copy.deepcopy(self._compile(candidates[0]))
        return copy.deepcopy({"oneOf": [self._compile(c) for c in candidates]})

    def generate_for_types(self, result_types: Iterable[type]) -> dict[str, Any]:
        """Full output schema (data + output envelope) for candidate result types."""
        return {
            "type": "object",
            "properties": {
                "data": self.data_node(result_types),
                "output": copy.deepcopy(OUTPUT_SCHEMA),
            },
            "required": ["data", "output"],
        }

    def generate_for_type(self, result_type: type) -> dict[str, Any]:
        return self.generate_for_types([result_type])

    def generate_for_handler(self, handler: Any) -> dict[str, Any]:
        """Output schema for a single operation, from its declared result types."""
        return self.generate_for_types(handler.result_types)

    def generate_for_group(self, name: str, groups: Mapping[str, Iterable[Any]]) -> dict[str, Any] | None:
        """
        Output schema for every operation in a handler group.

        Args:
            name: Group (tool) name
            groups: Group name -> handlers (instances or classes)

        Returns:
            The schema, or None when the group doesn't exist or its handlers
            declare no result types
        """
        handlers = groups.get(name)
        if handlers is None:
            return None
        result_types: dict[type, None] = {}
        for handler in handlers:
            for result_type in handler.result_types:
                result_types.setdefault(result_type, None)
        if not result_types:
            logger.warning(f"Handler group {name!r} declares no result types")
            return None
        return self.generate_for_types(result_types)

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def _compile(self, result_type: Any) -> dict[str, Any]:
        if not (isinstance(result_type, type) and dataclasses.is_dataclass(result_type)):
            raise SchemaGenerationError(
                _name(result_type),
                f"{_name(result_type)} is not a result shape; result types must be dataclasses",
            )

        cached = self._cache.get(result_type)
        if cached is not None:
            return cached
        if result_type in self._in_progress:
            self._placeholders += 1
            return {"type": "object", "description": f"(recursive: {result_type.__name__})"}

        placeholders_before = self._placeholders
        self._in_progress.add(result_type)
        try:
            table = variants_of(result_type)
            if table is not None:
                node = {"oneOf": [self._variant_node(result_type, v) for _, v in table.variants]}
            else:
                node = self._object_node(result_type)
        finally:
            self._in_progress.discard(result_type)

        if self._placeholders == placeholders_before:
            self._cache[result_type] = node
        logger.debug(f"Schema: compiled {result_type.__name__}")
        return node

    def _variant_node(self, base: type, variant: type) -> dict[str, Any]:
        if variants_of(variant) is not None:
            raise SchemaGenerationError(
                variant.__name__,
                f"{variant.__name__} is a variant of {base.__name__} and cannot declare variants of its own",
            )
        return self._compile(variant)

    def _object_node(self, cls: type) -> dict[str, Any]:
        try:
            hints = typing.get_type_hints(cls)
        except (NameError, TypeError) as e:
            raise SchemaGenerationError(cls.__name__, f"Cannot resolve annotations of {cls.__name__}: {e}") from e

        properties: dict[str, Any] = {}
        required: list[str] = []

        table = variant_table_for(cls)
        if table is not None:
            properties[table.discriminator] = {"type": "string", "const": table.tag_for(cls)}
            required.append(table.discriminator)

        for f in dataclasses.fields(cls):
            node, nullable = self._annotation(hints[f.name], f"{cls.__name__}.{f.name}")
            description = f.metadata.get("description")
            if description:
                node = {**node, "description": description}
            properties[f.name] = node
            if not nullable:
                required.append(f.name)

        node: dict[str, Any] = {
            "type": "object",
            "properties": properties,
            "required": required,
            "additionalProperties": False,
        }
        description = _description(cls)
        if description:
            node["description"] = description
        return node

    def _annotation(self, tp: Any, where: str) -> tuple[dict[str, Any], bool]:
        """Node for a member annotation, plus whether the member may be None."""
        origin = typing.get_origin(tp)
        if origin is Union or origin is types.UnionType:
            args = typing.get_args(tp)
            members = [a for a in args if a is not type(None)]
            nullable = len(members) < len(args)
            if len(members) == 1:
                return self._type_node(members[0], where), nullable
            return {"oneOf": [self._type_node(m, where) for m in members]}, nullable
        return self._type_node(tp, where), False

    def _type_node(self, tp: Any, where: str) -> dict[str, Any]:
        if tp is Any:
            return {}

        scalar = _SCALARS.get(tp)
        if scalar is not None:
            return dict(scalar)

        origin = typing.get_origin(tp)
        args = typing.get_args(tp)

        if origin is Literal:
            return {"enum": list(args)}

        if origin is Union or origin is types.UnionType:
            node, nullable = self._annotation(tp, where)
            return {"anyOf": [node, {"type": "null"}]} if nullable else node

        if isinstance(tp, type) and issubclass(tp, Enum):
            values = [member.value for member in tp]
            if all(isinstance(v, str) for v in values):
                return {"type": "string", "enum": values}
            if all(isinstance(v, int) and not isinstance(v, bool) for v in values):
                return {"type": "integer", "enum": values}
            raise SchemaGenerationError(tp.__name__, f"{where}: enum {tp.__name__} mixes value types")

        if origin in _ARRAY_ORIGINS or tp in (list, tuple, set, frozenset):
            if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
                raise SchemaGenerationError(_name(tp), f"{where}: fixed-length tuples are not supported")
            item = args[0] if args else Any
            return {"type": "array", "items": self._type_node(item, f"{where}[]")}

        if origin in (dict, Mapping) or tp is dict:
            if args and args[0] is not str:
                raise SchemaGenerationError(_name(tp), f"{where}: mapping keys must be str")
            node: dict[str, Any] = {"type": "object"}
            if len(args) == 2 and args[1] is not Any:
                node["additionalProperties"] = self._type_node(args[1], f"{where}{{}}")
            return node

        if isinstance(tp, type) and dataclasses.is_dataclass(tp):
            return self._compile(tp)

        raise SchemaGenerationError(_name(tp), f"{where}: unsupported member type {_name(tp)}")


# Global generator instance
_generator = OutputSchemaGenerator()


def get_schema_generator() -> OutputSchemaGenerator:
    """Get the global schema generator."""
    return _generator

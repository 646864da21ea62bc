"""
Result serialization.

Turns result dataclasses into the JSON-ready dicts the schemas describe:
None members are omitted, enums become their values, datetimes become ISO
strings, and variant instances carry their discriminator tag.
"""

import dataclasses
import datetime
from collections.abc import Mapping
from enum import Enum
from typing import Any

from models import SchemaGenerationError
from schemagen.shapes import variant_table_for, variants_of


def serialize_result(value: Any) -> Any:
    """Serialize a result (or any member of one) to JSON-compatible values."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        cls = type(value)
        if variants_of(cls) is not None:
            raise SchemaGenerationError(
                cls.__name__,
                f"{cls.__name__} is a polymorphic base; return one of its variants instead",
            )
        result: dict[str, Any] = {}
        table = variant_table_for(cls)
        if table is not None:
            result[table.discriminator] = table.tag_for(cls)
        for f in dataclasses.fields(value):
            member = getattr(value, f.name)
            if member is not None:
                result[f.name] = serialize_result(member)
        return result

    if isinstance(value, Mapping):
        return {str(k): serialize_result(v) for k, v in value.items()}

    if isinstance(value, (list, tuple, set, frozenset)):
        return [serialize_result(v) for v in value]

    raise SchemaGenerationError(type(value).__name__, f"Cannot serialize {type(value).__name__}")

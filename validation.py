"""
Wire value coercion.

Parameters arrive as JSON-like values: None, bool, int, float, str, list
and dict. Each coercer turns one of those into a requested Python type or
raises ValidationError naming the offending parameter.

Guaranteed coercions:
- exact type matches (str, bool, int, float, list, dict)
- int -> float widening, integral float -> int narrowing
- str -> Enum by value or member name (case-insensitive)
- list -> list[X] / tuple[X, ...] element-wise
- dict -> dataclass when the keys match the dataclass fields

Looser conversions ("true" -> True, "12" -> 12) are deliberately absent.
Callers that want them register a coercer for the target type.
"""

import dataclasses
import types
import typing
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any, Literal, Union

from models import ValidationError

# (parameter name, wire value) -> coerced value
Coercer = Callable[[str, Any], Any]


# =============================================================================
# HELPERS
# =============================================================================

def type_name(target: Any) -> str:
    """Readable name for a coercion target, used in error messages."""
    if isinstance(target, type) and not typing.get_args(target):
        return target.__name__
    return str(target).replace("typing.", "")


def _cannot_convert(key: str, value: Any, target: Any) -> ValidationError:
    return ValidationError(
        key,
        f"Cannot convert parameter '{key}' (value {value!r}) to {type_name(target)}",
    )


# =============================================================================
# SCALAR COERCERS
# =============================================================================

def coerce_str(key: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    raise _cannot_convert(key, value, str)


def coerce_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise _cannot_convert(key, value, bool)


def coerce_int(key: str, value: Any) -> int:
    # bool is an int subclass; JSON true is not a number
    if isinstance(value, bool):
        raise _cannot_convert(key, value, int)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise _cannot_convert(key, value, int)


def coerce_float(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise _cannot_convert(key, value, float)
    if isinstance(value, (int, float)):
        return float(value)
    raise _cannot_convert(key, value, float)


def coerce_enum(key: str, value: Any, enum_cls: type[Enum]) -> Enum:
    """Match a wire string against member values, then member names; a wire integer against integer values."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        for member in enum_cls:
            if type(member.value) is int and member.value == value:
                return member
    if isinstance(value, str):
        wanted = value.casefold()
        for member in enum_cls:
            if isinstance(member.value, str) and member.value.casefold() == wanted:
                return member
        for member in enum_cls:
            if member.name.casefold() == wanted:
                return member
    raise _cannot_convert(key, value, enum_cls)


# Extension point: exact-type coercers keyed by target type.
_COERCERS: dict[Any, Coercer] = {
    str: coerce_str,
    bool: coerce_bool,
    int: coerce_int,
    float: coerce_float,
}


def register_coercer(target: Any, coercer: Coercer) -> None:
    """
    Register (or replace) the coercer used for a target type.

    Registered coercers take precedence over the built-in structural rules,
    so this is also how a caller opts into looser conversions.
    """
    _COERCERS[target] = coercer


# =============================================================================
# STRUCTURED COERCERS
# =============================================================================

def coerce_sequence(key: str, value: Any, item_type: Any) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        raise _cannot_convert(key, value, list)
    return [coerce(f"{key}[{i}]", item, item_type) for i, item in enumerate(value)]


def coerce_mapping(key: str, value: Any, value_type: Any = Any) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        raise _cannot_convert(key, value, dict)
    result: dict[str, Any] = {}
    for name, item in value.items():
        if not isinstance(name, str):
            raise ValidationError(key, f"Parameter '{key}' has a non-string key {name!r}")
        result[name] = coerce(f"{key}.{name}", item, value_type)
    return result


def coerce_dataclass(key: str, value: Any, cls: type) -> Any:
    """
    Build a dataclass from a wire object.

    The object must supply every field without a default and nothing the
    dataclass doesn't declare.
    """
    if not isinstance(value, Mapping):
        raise _cannot_convert(key, value, cls)

    hints = typing.get_type_hints(cls)
    fields = {f.name: f for f in dataclasses.fields(cls) if f.init}

    unknown = sorted(set(value) - set(fields))
    if unknown:
        raise ValidationError(
            key,
            f"Parameter '{key}' has unknown members for {cls.__name__}: {', '.join(map(str, unknown))}",
        )

    kwargs: dict[str, Any] = {}
    for name, f in fields.items():
        if name in value:
            kwargs[name] = coerce(f"{key}.{name}", value[name], hints[name])
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise ValidationError(key, f"Parameter '{key}.{name}' is required")
    return cls(**kwargs)


# =============================================================================
# DISPATCH
# =============================================================================

def coerce(key: str, value: Any, target: Any) -> Any:
    """
    Coerce a wire value to ``target``.

    Args:
        key: Parameter name (nested values use dotted/indexed paths)
        value: The wire value
        target: A type or typing construct (``int``, ``list[str]``,
            ``Color | None``, a dataclass, ...)

    Raises:
        ValidationError: If the value can't be represented as ``target``
    """
    if target is Any:
        return value

    if target in _COERCERS:
        if value is None:
            raise ValidationError(key, f"Parameter '{key}' is null")
        return _COERCERS[target](key, value)

    origin = typing.get_origin(target)
    args = typing.get_args(target)

    if origin is Union or origin is types.UnionType:
        if value is None:
            if type(None) in args:
                return None
            raise ValidationError(key, f"Parameter '{key}' is null")
        for candidate in args:
            if candidate is type(None):
                continue
            try:
                return coerce(key, value, candidate)
            except ValidationError:
                continue
        raise _cannot_convert(key, value, target)

    if value is None:
        raise ValidationError(key, f"Parameter '{key}' is null")

    if origin is Literal:
        if any(value == arg and type(value) is type(arg) for arg in args):
            return value
        raise _cannot_convert(key, value, target)

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(coerce_sequence(key, value, args[0]))
        if not isinstance(value, (list, tuple)) or len(value) != len(args):
            raise _cannot_convert(key, value, target)
        return tuple(coerce(f"{key}[{i}]", item, t) for i, (item, t) in enumerate(zip(value, args)))

    if origin in (list, set, frozenset) or origin is Sequence:
        items = coerce_sequence(key, value, args[0] if args else Any)
        return origin(items) if origin in (set, frozenset) else items

    if target is list:
        return coerce_sequence(key, value, Any)

    if origin is dict or origin is Mapping:
        return coerce_mapping(key, value, args[1] if len(args) == 2 else Any)

    if target is dict:
        return coerce_mapping(key, value)

    if isinstance(target, type) and issubclass(target, Enum):
        return coerce_enum(key, value, target)

    if isinstance(target, type) and dataclasses.is_dataclass(target):
        return coerce_dataclass(key, value, target)

    raise ValidationError(
        key,
        f"No coercion to {type_name(target)} is available for parameter '{key}'",
    )

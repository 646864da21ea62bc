"""
Operation parameters: the per-call parameter bag.

Built once from the inbound wire values, read-only afterward. Keys match
case-insensitively. Extraction coerces through validation.coerce, so every
failure surfaces as a ValidationError naming the parameter.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from models import ValidationError
from validation import coerce

_ABSENT = object()


class OperationParameters:
    """Immutable, case-insensitive mapping of parameter name -> wire value."""

    __slots__ = ("_values", "_names")

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        folded: dict[str, Any] = {}
        names: dict[str, str] = {}
        for name, value in (values or {}).items():
            key = name.casefold()
            if key in folded:
                raise ValidationError(
                    name,
                    f"Parameter '{name}' is supplied twice (also as '{names[key]}')",
                )
            folded[key] = value
            names[key] = name
        self._values = MappingProxyType(folded)
        self._names = MappingProxyType(names)

    def __repr__(self) -> str:
        return f"OperationParameters({dict(zip(self._names.values(), self._values.values()))!r})"

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def keys(self) -> list[str]:
        """Parameter names as supplied (original casing)."""
        return list(self._names.values())

    def has(self, key: str) -> bool:
        """True when ``key`` is present with a non-null value."""
        return self._values.get(key.casefold()) is not None

    def get_raw(self, key: str) -> Any:
        """The unconverted wire value, or None when absent."""
        return self._values.get(key.casefold())

    def get_required(self, key: str, target: Any) -> Any:
        """
        Get a parameter that must be present.

        Args:
            key: Parameter name (case-insensitive)
            target: Type to coerce to, e.g. ``str``, ``int``, ``list[str]``

        Raises:
            ValidationError: If the parameter is absent, null, or not coercible
        """
        value = self._values.get(key.casefold(), _ABSENT)
        if value is _ABSENT or value is None:
            raise ValidationError(key, f"Parameter '{key}' is required")
        return coerce(key, value, target)

    def get_optional(self, key: str, target: Any, default: Any = None) -> Any:
        """
        Get a parameter that may be omitted.

        Absent and null both yield ``default``; tool wrappers pass None for
        arguments the caller didn't supply. A present value of the wrong
        type is still an error.

        Raises:
            ValidationError: If the parameter is present but not coercible
        """
        value = self._values.get(key.casefold(), _ABSENT)
        if value is _ABSENT or value is None:
            return default
        return coerce(key, value, target)

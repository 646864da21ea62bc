"""
Handler registry: operation name -> handler.

Built once, sealed, then only read. Name uniqueness is checked eagerly on
every registration path, case-insensitively, so a bad catalogue fails at
start-up rather than on the first call.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from handlers.base import OperationHandler
from handlers.context import OperationContext
from handlers.parameters import OperationParameters
from logging_config import log_dispatch, log_dispatch_result
from models import ConfigurationError, OperationNotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")

HandlerFactory = Callable[[], OperationHandler[Any]]


class HandlerRegistry(Generic[T]):
    """Immutable operation-name -> handler table."""

    def __init__(self, handlers: Iterable[OperationHandler[T]] = (), name: str = "") -> None:
        self.name = name
        self._handlers: dict[str, OperationHandler[T]] = {}
        self._sealed = False
        for handler in handlers:
            self.register(handler)
        self._sealed = True
        logger.info(f"Registry {name or '<anonymous>'}: {len(self._handlers)} operations")

    @classmethod
    def from_factories(cls, factories: Iterable[HandlerFactory], name: str = "") -> "HandlerRegistry[Any]":
        """
        Build a registry from a literal list of handler factories.

        Each factory (usually a handler class) is called exactly once.
        """
        return cls((factory() for factory in factories), name=name)

    def register(self, handler: OperationHandler[T]) -> None:
        """
        Add a handler under its declared operation name.

        Only valid while the registry is being constructed.

        Raises:
            ConfigurationError: On an empty or duplicate name, or when sealed
        """
        if self._sealed:
            raise ConfigurationError(
                f"Registry {self.name!r} is sealed; cannot register {type(handler).__name__}",
            )

        operation = getattr(handler, "operation", None)
        if not isinstance(operation, str) or not operation.strip():
            raise ConfigurationError(
                f"Handler {type(handler).__name__} does not declare an operation name",
                details={"handler": type(handler).__name__},
            )

        key = operation.casefold()
        existing = self._handlers.get(key)
        if existing is not None:
            raise ConfigurationError(
                f"Duplicate operation '{operation}': {type(existing).__name__} "
                f"and {type(handler).__name__} both claim it",
                details={
                    "operation": operation,
                    "handlers": [type(existing).__name__, type(handler).__name__],
                },
            )
        self._handlers[key] = handler

    def __contains__(self, operation: object) -> bool:
        return isinstance(operation, str) and operation.casefold() in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    @property
    def operations(self) -> list[str]:
        """Registered operation names, in registration order."""
        return [h.operation for h in self._handlers.values()]

    @property
    def handlers(self) -> list[OperationHandler[T]]:
        return list(self._handlers.values())

    def get_handler(self, operation: str | None) -> OperationHandler[T]:
        """
        Look up a handler by operation name (case-insensitive).

        Raises:
            OperationNotFoundError: Listing every valid name
        """
        handler = self._handlers.get(operation.casefold()) if isinstance(operation, str) and operation else None
        if handler is None:
            raise OperationNotFoundError(operation, self.operations)
        return handler

    def result_types(self) -> list[type]:
        """Every result type declared by the registered handlers, de-duplicated."""
        seen: dict[type, None] = {}
        for handler in self._handlers.values():
            for result_type in handler.result_types:
                seen.setdefault(result_type, None)
        return list(seen)

    def dispatch(
        self,
        operation: str | None,
        context: OperationContext[T],
        parameters: OperationParameters,
    ) -> Any:
        """Resolve ``operation`` and run it against ``context``."""
        handler = self.get_handler(operation)
        context.claim(handler.operation)
        log_dispatch(self.name, handler.operation, [k for k in parameters if parameters.has(k)])
        result = handler.execute(context, parameters)
        log_dispatch_result(self.name, handler.operation, context.is_modified)
        return result

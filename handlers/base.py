"""
Handler contract.

A handler implements one operation. It declares its name and the result
shapes it can return; the schema for those shapes is compiled once at
start-up, so execute() never has to describe itself.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from handlers.context import OperationContext
from handlers.parameters import OperationParameters

T = TypeVar("T")


class OperationHandler(ABC, Generic[T]):
    """
    Base class for operation handlers.

    Subclasses set ``operation`` and ``result_types`` as class attributes and
    implement ``execute``. Handlers are instantiated once per registry and
    must not keep per-call state.
    """

    operation: ClassVar[str] = ""

    # One type for a plain or polymorphic result; several when the operation
    # can return unrelated shapes.
    result_types: ClassVar[tuple[type, ...]] = ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(operation={self.operation!r})"

    @abstractmethod
    def execute(self, context: OperationContext[T], parameters: OperationParameters) -> Any:
        """Run the operation against ``context.document``."""

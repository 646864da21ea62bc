"""
Handlers: the dispatch framework every tool shares.

- parameters: per-call parameter bag with typed extraction
- context: per-call target resource + modification flag
- base: the handler contract
- registry: operation name -> handler table
"""

from .base import OperationHandler
from .context import OperationContext
from .parameters import OperationParameters
from .registry import HandlerRegistry

__all__ = [
    "OperationHandler",
    "OperationContext",
    "OperationParameters",
    "HandlerRegistry",
]

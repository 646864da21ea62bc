"""
Operation context: what a handler operates on.

Pairs the target resource with modification bookkeeping. Path and session
hints are carried for response metadata only; nothing here reads them.
"""

from typing import Generic, TypeVar

T = TypeVar("T")


class OperationContext(Generic[T]):
    """
    Per-call holder of the target resource.

    One instance serves exactly one dispatch. The modified flag can only be
    raised, never cleared.
    """

    def __init__(
        self,
        document: T,
        source_path: str | None = None,
        output_path: str | None = None,
        session_id: str | None = None,
    ) -> None:
        self._document = document
        self._modified = False
        self._claimed_by: str | None = None
        self.source_path = source_path
        self.output_path = output_path
        self.session_id = session_id

    def __repr__(self) -> str:
        return (
            f"OperationContext(document={type(self._document).__name__}, "
            f"modified={self._modified}, source_path={self.source_path!r})"
        )

    @property
    def document(self) -> T:
        return self._document

    @property
    def is_modified(self) -> bool:
        return self._modified

    @property
    def is_session(self) -> bool:
        return self.session_id is not None

    def mark_modified(self) -> None:
        """Record that the handler changed the document."""
        self._modified = True

    def claim(self, operation: str) -> None:
        """
        Bind this context to a single operation.

        Raises:
            RuntimeError: If the context already served another call
        """
        if self._claimed_by is not None:
            raise RuntimeError(
                f"OperationContext already used for '{self._claimed_by}'; "
                f"create a new context for '{operation}'"
            )
        self._claimed_by = operation

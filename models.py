"""
Type definitions for docops.

Error types shared by every layer:
- handlers/ raise these on registry and parameter problems
- schemagen/ raises these when a result type can't be described
- tools/ catch them and format the MCP response

Result shapes live in results/, not here.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


# ============================================================================
# ERROR TYPES
# ============================================================================

class ErrorKind(Enum):
    """Categories of errors for consistent handling."""
    CONFIGURATION = "configuration"          # Registry or result table built wrong
    NOT_FOUND = "not_found"                  # No such operation
    INVALID_INPUT = "invalid_input"          # Bad parameters
    SCHEMA_GENERATION = "schema_generation"  # Result type can't be described


class DocOpsError(Exception):
    """
    Structured error for consistent handling across layers.

    The framework raises these; tools catch and format for MCP response.
    Errors raised by a document engine are never wrapped in one.
    """

    kind: ErrorKind = ErrorKind.INVALID_INPUT

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for MCP response."""
        return {
            "error": True,
            "kind": self.kind.value,
            "message": self.message,
            **self.details,
        }


class ConfigurationError(DocOpsError):
    """A structural defect found while building a registry or variant table."""

    kind = ErrorKind.CONFIGURATION


class OperationNotFoundError(DocOpsError):
    """No registered operation matches the requested name."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, operation: str | None, available: list[str]):
        shown = operation if operation else "<empty>"
        super().__init__(
            f"Unknown operation: {shown}. Available operations: {', '.join(available)}",
            details={"operation": operation, "available": list(available)},
        )
        self.operation = operation
        self.available = list(available)


class ValidationError(DocOpsError, ValueError):
    """A parameter (or schema input) failed validation."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, parameter: str, message: str):
        super().__init__(message, details={"parameter": parameter})
        self.parameter = parameter


class SchemaGenerationError(DocOpsError):
    """A result type uses a shape the synthesizer can't describe."""

    kind = ErrorKind.SCHEMA_GENERATION

    def __init__(self, type_name: str, message: str):
        super().__init__(message, details={"type": type_name})
        self.type_name = type_name


# ============================================================================
# RESPONSE ENVELOPE
# ============================================================================

@dataclass
class OutputInfo:
    """
    Response metadata attached to every tool result.

    Wire names are fixed (camelCase) because agents key on them.
    """
    is_session: bool = False
    path: str | None = None
    session_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"isSession": self.is_session}
        if self.path is not None:
            result["path"] = self.path
        if self.session_id is not None:
            result["sessionId"] = self.session_id
        return result

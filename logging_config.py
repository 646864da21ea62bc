"""
Logging configuration for docops.

Simple setup that handlers, tools and the server can import.
Result shapes and schema synthesis should NOT log beyond DEBUG.
"""

import logging
import sys
from collections.abc import Iterable

# Create logger for the package
logger = logging.getLogger("docops")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for docops.

    Logs go to stderr; stdout carries the MCP stdio transport.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)

    Raises:
        ValueError: If level isn't a known level name
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    # Module loggers are named after their modules (handlers.registry,
    # tools.common, ...), so configure the root logger they all reach.
    root = logging.getLogger()
    root.setLevel(numeric)

    # Only add handler if not already configured
    if not any(getattr(h, "_docops", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)

        # Concise format for MCP context
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        handler._docops = True  # type: ignore[attr-defined]
        root.addHandler(handler)


# NOTE: Call configure_logging() explicitly in server.py or test setup.
# We don't auto-configure to avoid side effects on import.


# Convenience functions for common patterns
def log_dispatch(registry: str, operation: str, parameter_names: Iterable[str]) -> None:
    """Log an operation dispatch with the parameter names supplied."""
    logger.debug(f"Dispatch: {registry}.{operation}({', '.join(parameter_names)})")


def log_dispatch_result(registry: str, operation: str, modified: bool) -> None:
    """Log dispatch outcome."""
    if modified:
        logger.debug(f"Dispatch: {registry}.{operation} modified the document")
    else:
        logger.debug(f"Dispatch: {registry}.{operation} completed")

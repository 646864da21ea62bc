"""
email_attachment tool: list, add, remove and extract attachments.
"""

from typing import Any

from operations import build_registry
from tools.common import run_operation

registry = build_registry("email_attachment")


def do_email_attachment(
    operation: str | None,
    path: str | None,
    output_path: str | None = None,
    **params: Any,
) -> dict[str, Any]:
    """
    Run an email_attachment operation.

    Args:
        operation: One of list_attachments, add_attachment,
            remove_attachment, extract_attachment
        path: Message file (.eml) to operate on
        output_path: Where to save a modified message (default: overwrite path)
        **params: Operation parameters; None means "not supplied"

    Returns:
        Envelope dict on success, error dict on failure
    """
    return run_operation(registry, operation, path, output_path, params)

"""
email_content tool: read and edit a message's body, headers, subject and
recipients.
"""

from typing import Any

from operations import build_registry
from tools.common import run_operation

registry = build_registry("email_content")


def do_email_content(
    operation: str | None,
    path: str | None,
    output_path: str | None = None,
    **params: Any,
) -> dict[str, Any]:
    """
    Run an email_content operation.

    Args:
        operation: One of get_body, set_body, get_headers, set_header,
            remove_header, get_subject, set_subject, get_recipients,
            set_recipients
        path: Message file (.eml) to operate on
        output_path: Where to save a modified message (default: overwrite path)
        **params: Operation parameters; None means "not supplied"

    Returns:
        Envelope dict on success, error dict on failure
    """
    return run_operation(registry, operation, path, output_path, params)

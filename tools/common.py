"""
Shared tool glue: load, dispatch, save, wrap.

Every tool call goes through run_operation(): build the parameter bag,
resolve the handler, load the message, dispatch, write it back when the
handler modified it, and wrap the result in the {data, output} envelope.
"""

import logging
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from pathlib import Path
from typing import Any

from handlers import HandlerRegistry, OperationContext, OperationParameters
from models import DocOpsError, OutputInfo, ValidationError
from schemagen import serialize_result

logger = logging.getLogger(__name__)


def load_message(path: str | None) -> EmailMessage:
    """
    Parse an RFC 5322 message (.eml) from disk.

    Raises:
        ValidationError: If path is missing or doesn't name a file
    """
    if not path:
        raise ValidationError("path", "Parameter 'path' is required")
    source = Path(path)
    if not source.is_file():
        raise ValidationError("path", f"File not found: {path}")
    with source.open("rb") as f:
        return BytesParser(policy=policy.default).parse(f)  # type: ignore[return-value]


def save_message(message: EmailMessage, path: str) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(message.as_bytes())


def run_operation(
    registry: HandlerRegistry[EmailMessage],
    operation: str | None,
    path: str | None,
    output_path: str | None,
    params: dict[str, Any],
) -> dict[str, Any]:
    """
    Execute one operation against the message at ``path``.

    Modified messages are written to ``output_path`` (default: ``path``).

    Returns:
        ``{"data": ..., "output": ...}`` on success, error dict on DocOpsError
    """
    try:
        # Unknown operations fail before the file is read
        registry.get_handler(operation)
        parameters = OperationParameters(params)
        message = load_message(path)
        context = OperationContext(message, source_path=path, output_path=output_path)
        result = registry.dispatch(operation, context, parameters)
        data = serialize_result(result)
    except DocOpsError as e:
        logger.info(f"{registry.name}.{operation} failed: {e.message}")
        return e.to_dict()

    written = path
    if context.is_modified:
        written = output_path or path
        save_message(message, written)
        logger.debug(f"Saved {registry.name}.{operation} result to {written}")

    output = OutputInfo(is_session=context.is_session, path=written, session_id=context.session_id)
    return {"data": data, "output": output.to_dict()}

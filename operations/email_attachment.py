"""
email_attachment operations: list, add, remove and extract attachments.

Attachments are addressed by index: their position in a depth-first walk
of the MIME tree, counting only parts with ``Content-Disposition:
attachment``. Forwarded messages are not descended into.
"""

import logging
import mimetypes
from collections.abc import Iterator
from email.message import EmailMessage
from pathlib import Path
from typing import Any

from handlers import OperationContext, OperationHandler, OperationParameters
from models import ValidationError
from results import (
    AttachmentInfo,
    AttachmentListResult,
    ExtractedAttachmentResult,
    FileAttachmentInfo,
    MessageAttachmentInfo,
    SuccessResult,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _walk_attachments(container: EmailMessage) -> Iterator[tuple[EmailMessage, EmailMessage]]:
    """Yield (parent, part) for every attachment, in document order."""
    for part in container.iter_parts():
        if part.is_attachment():
            yield container, part
        elif part.is_multipart():
            yield from _walk_attachments(part)


def _attachments(message: EmailMessage) -> list[tuple[EmailMessage, EmailMessage]]:
    if not message.is_multipart():
        return []
    return list(_walk_attachments(message))


def _select(message: EmailMessage, parameters: OperationParameters) -> tuple[int, EmailMessage, EmailMessage]:
    index = parameters.get_required("index", int)
    found = _attachments(message)
    if not 0 <= index < len(found):
        raise ValidationError(
            "index",
            f"Attachment index {index} is out of range (message has {len(found)} attachment(s))",
        )
    parent, part = found[index]
    return index, parent, part


def _payload_bytes(part: EmailMessage) -> bytes:
    if part.get_content_type() == "message/rfc822":
        return part.get_content().as_bytes()
    return part.get_payload(decode=True) or b""


def _describe(index: int, part: EmailMessage) -> AttachmentInfo:
    content_type = part.get_content_type()
    size = len(_payload_bytes(part))
    if content_type == "message/rfc822":
        inner = part.get_content()
        sender = inner.get("From")
        return MessageAttachmentInfo(
            index=index,
            content_type=content_type,
            size=size,
            subject=str(inner.get("Subject", "")),
            sender=str(sender) if sender is not None else None,
        )
    return FileAttachmentInfo(
        index=index,
        content_type=content_type,
        size=size,
        filename=part.get_filename(),
    )


def _output_filename(index: int, part: EmailMessage) -> str:
    """Safe filename for an extracted attachment."""
    name = Path(part.get_filename() or "").name
    if name and name not in (".", ".."):
        return name
    extension = ".eml" if part.get_content_type() == "message/rfc822" else (
        mimetypes.guess_extension(part.get_content_type()) or ".bin"
    )
    return f"attachment-{index}{extension}"


class ListAttachmentsHandler(OperationHandler[EmailMessage]):
    operation = "list_attachments"
    result_types = (AttachmentListResult,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        infos = [_describe(i, part) for i, (_, part) in enumerate(_attachments(context.document))]
        return AttachmentListResult(attachments=infos, count=len(infos))


class AddAttachmentHandler(OperationHandler[EmailMessage]):
    """
    Attach a file from disk.

    ``filename`` overrides the attached name (default: the file's own name);
    ``content_type`` overrides the type guessed from that name.
    """

    operation = "add_attachment"
    result_types = (AttachmentInfo,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        source = Path(parameters.get_required("file_path", str))
        if not source.is_file():
            raise ValidationError("file_path", f"File not found: {source}")

        filename = parameters.get_optional("filename", str) or source.name
        content_type = parameters.get_optional("content_type", str)
        if not content_type:
            content_type = mimetypes.guess_type(filename)[0] or _DEFAULT_CONTENT_TYPE
        if content_type.count("/") != 1:
            raise ValidationError("content_type", f"Invalid content type: {content_type!r}")
        maintype, subtype = content_type.split("/")

        data = source.read_bytes()
        message = context.document
        message.add_attachment(data, maintype=maintype, subtype=subtype, filename=filename)
        context.mark_modified()
        logger.debug(f"Attached {filename} ({len(data)} bytes, {content_type})")

        index = len(_attachments(message)) - 1
        return FileAttachmentInfo(index=index, content_type=content_type, size=len(data), filename=filename)


class RemoveAttachmentHandler(OperationHandler[EmailMessage]):
    operation = "remove_attachment"
    result_types = (SuccessResult,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        index, parent, part = _select(context.document, parameters)
        label = part.get_filename() or part.get_content_type()
        parent.set_payload([p for p in parent.get_payload() if p is not part])
        context.mark_modified()
        return SuccessResult(message=f"Removed attachment {index} ({label})")


class ExtractAttachmentHandler(OperationHandler[EmailMessage]):
    """Write one attachment's decoded content into ``output_dir``."""

    operation = "extract_attachment"
    result_types = (ExtractedAttachmentResult,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        index, _, part = _select(context.document, parameters)
        output_dir = Path(parameters.get_required("output_dir", str))
        output_dir.mkdir(parents=True, exist_ok=True)

        filename = _output_filename(index, part)
        target = output_dir / filename
        data = _payload_bytes(part)
        target.write_bytes(data)
        return ExtractedAttachmentResult(path=str(target), filename=filename, size=len(data))

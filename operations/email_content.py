"""
email_content operations: body, headers, subject and recipients.

Handlers work on an already-parsed EmailMessage (policy.default) and never
touch the filesystem; loading and saving happen in tools/.
"""

from email.headerregistry import AddressHeader
from email.message import EmailMessage, MIMEPart
from typing import Any

from handlers import OperationContext, OperationHandler, OperationParameters
from models import ValidationError
from results import (
    BodyFormat,
    BodyResult,
    EmailAddress,
    HeaderEntry,
    HeadersResult,
    HeaderValueResult,
    RecipientsResult,
    SubjectResult,
    SuccessResult,
)

RECIPIENT_FIELDS = ("to", "cc", "bcc")

# Headers that describe the MIME structure; editing them by hand corrupts it.
_STRUCTURAL_HEADERS = frozenset({"mime-version", "content-type", "content-transfer-encoding"})


def _header_name(parameters: OperationParameters) -> str:
    name = parameters.get_required("name", str).strip()
    if not name:
        raise ValidationError("name", "Parameter 'name' must not be blank")
    if name.lower() in _STRUCTURAL_HEADERS:
        raise ValidationError("name", f"Header '{name}' is managed by the message structure and can't be edited")
    return name


def _other_format(fmt: BodyFormat) -> BodyFormat:
    return BodyFormat.HTML if fmt is BodyFormat.PLAIN else BodyFormat.PLAIN


def _addresses(message: EmailMessage, field: str) -> list[EmailAddress]:
    addresses: list[EmailAddress] = []
    for header in message.get_all(field, []):
        if not isinstance(header, AddressHeader):
            continue
        for address in header.addresses:
            addresses.append(EmailAddress(
                address=address.addr_spec,
                display_name=address.display_name or None,
            ))
    return addresses


# ============================================================================
# BODY
# ============================================================================

class GetBodyHandler(OperationHandler[EmailMessage]):
    """Return the main body, preferring ``format`` (plain unless given)."""

    operation = "get_body"
    result_types = (BodyResult,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        preferred = parameters.get_optional("format", BodyFormat, BodyFormat.PLAIN)
        part = context.document.get_body(preferencelist=(preferred.value, _other_format(preferred).value))
        if part is None:
            return BodyResult(body="", format=preferred)
        return BodyResult(
            body=part.get_content(),
            format=BodyFormat(part.get_content_subtype()),
            charset=part.get_content_charset(),
        )


class SetBodyHandler(OperationHandler[EmailMessage]):
    """
    Replace the main body.

    The existing body part (same format first) is rewritten in place, so
    attachments survive. A multipart message without a body gets a new
    body part in front.
    """

    operation = "set_body"
    result_types = (SuccessResult,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        body = parameters.get_required("body", str)
        fmt = parameters.get_optional("format", BodyFormat, BodyFormat.PLAIN)
        message = context.document

        if not message.is_multipart():
            message.set_content(body, subtype=fmt.value)
        else:
            part = message.get_body(preferencelist=(fmt.value, _other_format(fmt).value))
            if part is not None:
                part.set_content(body, subtype=fmt.value)
            else:
                part = MIMEPart(policy=message.policy)
                part.set_content(body, subtype=fmt.value)
                message.get_payload().insert(0, part)

        context.mark_modified()
        return SuccessResult(message=f"Body replaced ({fmt.value}, {len(body)} characters)")


# ============================================================================
# HEADERS
# ============================================================================

class GetHeadersHandler(OperationHandler[EmailMessage]):
    """All headers, or every value of the header named by ``name``."""

    operation = "get_headers"
    result_types = (HeadersResult, HeaderValueResult)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        message = context.document
        name = parameters.get_optional("name", str)
        if name:
            return HeaderValueResult(name=name, values=[str(v) for v in message.get_all(name, [])])

        entries = [HeaderEntry(name=k, value=str(v)) for k, v in message.items()]
        return HeadersResult(headers=entries, count=len(entries))


class SetHeaderHandler(OperationHandler[EmailMessage]):
    """Set a header, replacing every existing occurrence."""

    operation = "set_header"
    result_types = (SuccessResult,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        name = _header_name(parameters)
        value = parameters.get_required("value", str)
        message = context.document

        replaced = name in message
        del message[name]
        message[name] = value
        context.mark_modified()
        return SuccessResult(message=f"Header '{name}' {'replaced' if replaced else 'added'}")


class RemoveHeaderHandler(OperationHandler[EmailMessage]):
    operation = "remove_header"
    result_types = (SuccessResult,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        name = _header_name(parameters)
        message = context.document

        count = len(message.get_all(name, []))
        if count == 0:
            return SuccessResult(message=f"Header '{name}' not present; nothing removed")
        del message[name]
        context.mark_modified()
        return SuccessResult(message=f"Removed {count} '{name}' header(s)")


# ============================================================================
# SUBJECT & RECIPIENTS
# ============================================================================

class GetSubjectHandler(OperationHandler[EmailMessage]):
    operation = "get_subject"
    result_types = (SubjectResult,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        return SubjectResult(subject=str(context.document.get("Subject", "")))


class SetSubjectHandler(OperationHandler[EmailMessage]):
    operation = "set_subject"
    result_types = (SuccessResult,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        subject = parameters.get_required("subject", str)
        message = context.document
        del message["Subject"]
        message["Subject"] = subject
        context.mark_modified()
        return SuccessResult(message=f"Subject set to {subject!r}")


class GetRecipientsHandler(OperationHandler[EmailMessage]):
    operation = "get_recipients"
    result_types = (RecipientsResult,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        message = context.document
        return RecipientsResult(
            to=_addresses(message, "To"),
            cc=_addresses(message, "Cc"),
            bcc=_addresses(message, "Bcc"),
        )


class SetRecipientsHandler(OperationHandler[EmailMessage]):
    """
    Replace To, Cc and/or Bcc.

    Only the fields supplied are touched; an empty list clears that field.
    """

    operation = "set_recipients"
    result_types = (SuccessResult,)

    def execute(self, context: OperationContext[EmailMessage], parameters: OperationParameters) -> Any:
        updates = {
            field: parameters.get_optional(field, list[str])
            for field in RECIPIENT_FIELDS
        }
        updates = {k: v for k, v in updates.items() if v is not None}
        if not updates:
            raise ValidationError("to", "At least one of 'to', 'cc' or 'bcc' is required")

        message = context.document
        for field, addresses in updates.items():
            header = field.capitalize()
            del message[header]
            if addresses:
                message[header] = ", ".join(addresses)

        context.mark_modified()
        changed = ", ".join(f"{k}={len(v)}" for k, v in updates.items())
        return SuccessResult(message=f"Recipients updated ({changed})")

"""
Test helpers: message builders and file round-trips.

Messages are built with the stdlib email API, so no .eml fixtures live on
disk; tests write them to tmp_path as needed.
"""

from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from pathlib import Path

from handlers import OperationContext, OperationParameters


def build_plain_message() -> EmailMessage:
    """Single-part text/plain message with To, Cc and a custom header."""
    msg = EmailMessage()
    msg["From"] = "Ada Lovelace <ada@example.com>"
    msg["To"] = "Charles Babbage <charles@example.com>, grace@example.com"
    msg["Cc"] = "team@example.com"
    msg["Subject"] = "Engine notes"
    msg["X-Project"] = "analytical-engine"
    msg.set_content("Hello Charles,\n\nNotes below.\n")
    return msg


def build_multipart_message() -> EmailMessage:
    """
    multipart/mixed:
    - multipart/alternative (text/plain, text/html)
    - notes.pdf attachment (index 0)
    - forwarded message/rfc822 attachment (index 1)
    """
    msg = build_plain_message()
    msg.add_alternative("<p>Hello Charles,</p><p>Notes below.</p>", subtype="html")
    msg.add_attachment(b"%PDF-1.4 fake", maintype="application", subtype="pdf", filename="notes.pdf")

    forwarded = EmailMessage()
    forwarded["From"] = "Grace Hopper <grace@example.com>"
    forwarded["Subject"] = "Original thread"
    forwarded.set_content("Earlier message.\n")
    msg.add_attachment(forwarded)
    return msg


def write_message(path: Path, message: EmailMessage) -> str:
    path.write_bytes(message.as_bytes())
    return str(path)


def read_message(path: str | Path) -> EmailMessage:
    with open(path, "rb") as f:
        return BytesParser(policy=policy.default).parse(f)  # type: ignore[return-value]


def make_call(document: object, **params: object) -> tuple[OperationContext, OperationParameters]:
    """Fresh (context, parameters) pair for calling a handler directly."""
    return OperationContext(document), OperationParameters(params)

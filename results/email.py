"""
Result shapes for the email tools.

AttachmentInfo is polymorphic: regular files and forwarded messages carry
different members, told apart on the wire by the ``kind`` property.
"""

from dataclasses import dataclass, field
from enum import Enum

from schemagen.shapes import declare_variants


class BodyFormat(Enum):
    PLAIN = "plain"
    HTML = "html"


# ============================================================================
# CONTENT
# ============================================================================

@dataclass
class BodyResult:
    """Message body text."""
    body: str
    format: BodyFormat
    charset: str | None = None


@dataclass
class SubjectResult:
    """Message subject (empty when the header is missing)."""
    subject: str


@dataclass
class HeaderEntry:
    name: str
    value: str


@dataclass
class HeadersResult:
    """Every header of the message, in order."""
    headers: list[HeaderEntry]
    count: int


@dataclass
class HeaderValueResult:
    """All values of one header; empty when it isn't set."""
    name: str
    values: list[str]


@dataclass
class EmailAddress:
    address: str
    display_name: str | None = None


@dataclass
class RecipientsResult:
    """To, Cc and Bcc recipients."""
    to: list[EmailAddress] = field(default_factory=list)
    cc: list[EmailAddress] = field(default_factory=list)
    bcc: list[EmailAddress] = field(default_factory=list)


# ============================================================================
# ATTACHMENTS
# ============================================================================

@dataclass
class AttachmentInfo:
    """An attachment on the message."""
    index: int  # Position among the message's attachments, from 0
    content_type: str
    size: int  # Decoded size in bytes


@dataclass
class FileAttachmentInfo(AttachmentInfo):
    """A file attachment."""
    filename: str | None = None


@dataclass
class MessageAttachmentInfo(AttachmentInfo):
    """A forwarded message (message/rfc822)."""
    subject: str = ""
    sender: str | None = None


ATTACHMENT_VARIANTS = declare_variants(
    AttachmentInfo,
    [
        ("file", FileAttachmentInfo),
        ("message", MessageAttachmentInfo),
    ],
    discriminator="kind",
)


@dataclass
class AttachmentListResult:
    """Attachments on the message."""
    attachments: list[AttachmentInfo]
    count: int


@dataclass
class ExtractedAttachmentResult:
    """An attachment written to disk."""
    path: str
    filename: str
    size: int

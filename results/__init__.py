"""
Results: the shapes handlers return.

Every class here is a dataclass; schemagen derives the published output
schemas from these definitions.
"""

from .common import SuccessResult
from .email import (
    AttachmentInfo,
    AttachmentListResult,
    BodyFormat,
    BodyResult,
    EmailAddress,
    ExtractedAttachmentResult,
    FileAttachmentInfo,
    HeaderEntry,
    HeadersResult,
    HeaderValueResult,
    MessageAttachmentInfo,
    RecipientsResult,
    SubjectResult,
)

__all__ = [
    "SuccessResult",
    "AttachmentInfo",
    "AttachmentListResult",
    "BodyFormat",
    "BodyResult",
    "EmailAddress",
    "ExtractedAttachmentResult",
    "FileAttachmentInfo",
    "HeaderEntry",
    "HeadersResult",
    "HeaderValueResult",
    "MessageAttachmentInfo",
    "RecipientsResult",
    "SubjectResult",
]

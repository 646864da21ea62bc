"""
Operations: concrete handlers, grouped by tool.

HANDLER_GROUPS is the single source of truth for which operations each
tool exposes. Registries and group schemas are both built from it.
"""

from typing import Any

from handlers import HandlerRegistry, OperationHandler

from .email_attachment import (
    AddAttachmentHandler,
    ExtractAttachmentHandler,
    ListAttachmentsHandler,
    RemoveAttachmentHandler,
)
from .email_content import (
    GetBodyHandler,
    GetHeadersHandler,
    GetRecipientsHandler,
    GetSubjectHandler,
    RemoveHeaderHandler,
    SetBodyHandler,
    SetHeaderHandler,
    SetRecipientsHandler,
    SetSubjectHandler,
)

HANDLER_GROUPS: dict[str, tuple[type[OperationHandler[Any]], ...]] = {
    "email_content": (
        GetBodyHandler,
        SetBodyHandler,
        GetHeadersHandler,
        SetHeaderHandler,
        RemoveHeaderHandler,
        GetSubjectHandler,
        SetSubjectHandler,
        GetRecipientsHandler,
        SetRecipientsHandler,
    ),
    "email_attachment": (
        ListAttachmentsHandler,
        AddAttachmentHandler,
        RemoveAttachmentHandler,
        ExtractAttachmentHandler,
    ),
}


def build_registry(group: str) -> HandlerRegistry[Any]:
    """
    Build the sealed registry for one tool.

    Raises:
        KeyError: If ``group`` isn't in HANDLER_GROUPS
    """
    return HandlerRegistry.from_factories(HANDLER_GROUPS[group], name=group)


__all__ = ["HANDLER_GROUPS", "build_registry"]

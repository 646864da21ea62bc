"""
Tools: MCP tool implementations.

Each tool has its own module; server.py provides thin @mcp.tool() wrappers
that call into these. A tool is one handler group from operations/.

- email_content: body, headers, subject, recipients
- email_attachment: list, add, remove, extract attachments
"""

from . import email_attachment, email_content
from .email_attachment import do_email_attachment
from .email_content import do_email_content

# Tool name -> sealed handler registry, one per tool.
REGISTRIES = {
    "email_content": email_content.registry,
    "email_attachment": email_attachment.registry,
}

__all__ = ["do_email_content", "do_email_attachment", "REGISTRIES"]

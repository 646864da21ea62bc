#!/usr/bin/env python3
"""
docops MCP Server

Document operations exposed as MCP tools. Each tool is a category of
related operations selected by an ``operation`` argument; every result
comes back as ``{data, output}`` and its shape is published as JSON Schema.

Tools:
- email_content: body, headers, subject, recipients of an .eml file
- email_attachment: list, add, remove, extract attachments

Schemas are provided via MCP Resources:
- docops://schemas/{tool}
- docops://schemas/{tool}/{operation}

Architecture:
- handlers/: Dispatch framework (parameter bag, context, registry)
- schemagen/: Output schemas derived from result dataclasses
- results/: Result shapes
- operations/: Concrete handlers, grouped by tool
- tools/: Tool glue (load, dispatch, save, envelope)
- server.py: Thin MCP wrappers (this file)
"""

import json
import logging
import os
import signal
from collections.abc import Callable
from typing import Any

from mcp.server.fastmcp import FastMCP

from filters import ToolFilter
from logging_config import configure_logging
from models import DocOpsError
from resources.schemas import SCHEMA_URI_PREFIX, SchemaResourceRegistry
from server_config import ServerConfig
from tools import REGISTRIES, do_email_attachment, do_email_content

logger = logging.getLogger(__name__)


# ============================================================================
# TOOLS: thin wrappers
# ============================================================================

def email_content(
    operation: str,
    path: str,
    output_path: str | None = None,
    format: str | None = None,
    body: str | None = None,
    name: str | None = None,
    value: str | None = None,
    subject: str | None = None,
    to: list[str] | None = None,
    cc: list[str] | None = None,
    bcc: list[str] | None = None,
) -> dict[str, Any]:
    """
    Read and edit an email message (.eml): body, headers, subject, recipients.

    Args:
        operation: One of 'get_body', 'set_body', 'get_headers', 'set_header',
            'remove_header', 'get_subject', 'set_subject', 'get_recipients',
            'set_recipients'
        path: Message file to operate on
        output_path: Where to save a modified message (default: overwrite path)
        format: 'plain' or 'html'. Preferred format for get_body, body format for set_body
        body: New body text (required for set_body)
        name: Header name (required for set_header, remove_header; optional
            for get_headers to read one header)
        value: Header value (required for set_header)
        subject: New subject (required for set_subject)
        to: Recipient addresses (set_recipients; an empty list clears the field)
        cc: Cc addresses (set_recipients)
        bcc: Bcc addresses (set_recipients)

    Returns:
        data: Operation result (shape per docops://schemas/email_content/{operation})
        output: {path, isSession}, where the message lives after the call
    """
    return do_email_content(
        operation, path, output_path,
        format=format, body=body, name=name, value=value, subject=subject,
        to=to, cc=cc, bcc=bcc,
    )


def email_attachment(
    operation: str,
    path: str,
    output_path: str | None = None,
    index: int | None = None,
    file_path: str | None = None,
    filename: str | None = None,
    content_type: str | None = None,
    output_dir: str | None = None,
) -> dict[str, Any]:
    """
    Manage attachments of an email message (.eml).

    Attachments are addressed by index, as returned by list_attachments.

    Args:
        operation: One of 'list_attachments', 'add_attachment',
            'remove_attachment', 'extract_attachment'
        path: Message file to operate on
        output_path: Where to save a modified message (default: overwrite path)
        index: Attachment index (required for remove_attachment, extract_attachment)
        file_path: File to attach (required for add_attachment)
        filename: Attached filename (add_attachment; default: file_path's name)
        content_type: MIME type (add_attachment; default: guessed from filename)
        output_dir: Directory to extract into (required for extract_attachment)

    Returns:
        data: Operation result (shape per docops://schemas/email_attachment/{operation})
        output: {path, isSession}, where the message lives after the call
    """
    return do_email_attachment(
        operation, path, output_path,
        index=index, file_path=file_path, filename=filename,
        content_type=content_type, output_dir=output_dir,
    )


# Tool name -> wrapper. Registration is filtered by ToolFilter.
TOOLS: dict[str, Callable[..., dict[str, Any]]] = {
    "email_content": email_content,
    "email_attachment": email_attachment,
}


# ============================================================================
# SERVER ASSEMBLY
# ============================================================================

def _docs_overview(registered: list[str], tool_filter: ToolFilter, schemas: SchemaResourceRegistry) -> str:
    lines = [
        "# docops",
        "",
        "Document operations over MCP. Each tool takes an `operation` argument;",
        "results come back as `{data, output}`.",
        "",
        f"Enabled categories: {tool_filter.enabled_categories()}",
        "",
        "## Tools",
        "",
        "| Tool | Operations |",
        "|------|------------|",
    ]
    for name in registered:
        lines.append(f"| `{name}` | {', '.join(REGISTRIES[name].operations)} |")
    lines += [
        "",
        "## Resources",
        "",
        "- `docops://docs/overview`: This overview",
        f"- `{SCHEMA_URI_PREFIX}{{tool}}`: Output schema for every operation of a tool",
        f"- `{SCHEMA_URI_PREFIX}{{tool}}/{{operation}}`: Output schema for one operation",
        "",
        "## Schemas",
        "",
    ]
    for resource in schemas.list_resources():
        lines.append(f"- `{resource['uri']}`: {resource['description']}")
    return "\n".join(lines) + "\n"


def create_server(config: ServerConfig) -> FastMCP:
    """
    Build the MCP server for ``config``.

    Only tools the policy enables are registered, and only their schemas
    are published. Schemas compile here, so an unsupported result type
    fails start-up.
    """
    tool_filter = config.tool_filter()
    server = FastMCP("docops")
    schemas = SchemaResourceRegistry()

    registered: list[str] = []
    for name, fn in TOOLS.items():
        if not tool_filter.is_tool_enabled(name):
            logger.info(f"Tool {name} disabled by policy")
            continue
        server.add_tool(fn, name=name)
        schemas.register_group(name, REGISTRIES[name])
        registered.append(name)

    schemas.compile_all()
    logger.info(f"docops: {len(registered)} tools, categories: {tool_filter.enabled_categories()}")

    # ------------------------------------------------------------------------
    # RESOURCES: Self-documenting MCP capabilities
    # ------------------------------------------------------------------------

    @server.resource("docops://docs/overview")
    def docs_overview() -> str:
        """Overview of the docops MCP server."""
        return _docs_overview(registered, tool_filter, schemas)

    @server.resource(SCHEMA_URI_PREFIX + "{tool}", mime_type="application/json")
    def tool_schema(tool: str) -> str:
        """Output schema for every operation of a tool."""
        try:
            return schemas.get_resource(f"{SCHEMA_URI_PREFIX}{tool}")["text"]
        except KeyError:
            return json.dumps({"error": True, "kind": "not_found", "message": f"Tool not found: {tool}"})

    @server.resource(SCHEMA_URI_PREFIX + "{tool}/{operation}", mime_type="application/json")
    def operation_schema(tool: str, operation: str) -> str:
        """Output schema for one operation of a tool."""
        try:
            return schemas.get_resource(f"{SCHEMA_URI_PREFIX}{tool}/{operation}")["text"]
        except KeyError:
            return json.dumps({"error": True, "kind": "not_found", "message": f"Tool not found: {tool}"})
        except DocOpsError as e:
            return json.dumps(e.to_dict())

    return server


# Module-level server, as `mcp dev server.py` and `python server.py` expect
config = ServerConfig.from_env()
configure_logging(config.log_level)
mcp = create_server(config)


# ============================================================================
# SERVER ENTRY POINT
# ============================================================================

def _shutdown_handler(signum: int, frame: object) -> None:
    """Handle termination signals by exiting immediately.

    os._exit() is required because sys.exit() raises SystemExit,
    which asyncio's event loop catches and ignores. The server
    would survive SIGTERM until stdin closes.
    """
    os._exit(0)


if __name__ == "__main__":
    signal.signal(signal.SIGTERM, _shutdown_handler)
    signal.signal(signal.SIGINT, _shutdown_handler)
    mcp.run()

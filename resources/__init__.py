"""Resources: MCP resources published by the server."""

"""
Output Schema Resources

Publishes synthesized output schemas as MCP resources:

- docops://schemas/{tool}: every result shape the tool can return
- docops://schemas/{tool}/{operation}: result shapes of one operation

Schemas are compiled once when the server starts (compile_all), so a result
type the synthesizer can't describe stops start-up instead of failing on
the first read.
"""

import json
import logging
from typing import Any

from handlers import HandlerRegistry
from schemagen import OutputSchemaGenerator, get_schema_generator

logger = logging.getLogger(__name__)

SCHEMA_URI_PREFIX = "docops://schemas/"


class SchemaResourceRegistry:
    """
    Registry of schema resources, one group per tool.

    Resources are cached as rendered JSON text.
    """

    def __init__(self, generator: OutputSchemaGenerator | None = None) -> None:
        self._generator = generator or get_schema_generator()
        self._registries: dict[str, HandlerRegistry[Any]] = {}
        self._cache: dict[str, dict[str, str]] = {}

    def register_group(self, name: str, registry: HandlerRegistry[Any]) -> None:
        """Register a tool's handler registry for schema generation."""
        self._registries[name] = registry
        # Clear cache for this tool
        prefix = f"{SCHEMA_URI_PREFIX}{name}"
        for uri in [u for u in self._cache if u == prefix or u.startswith(prefix + "/")]:
            del self._cache[uri]

    def group_schema(self, tool: str) -> dict[str, Any] | None:
        """Schema for every operation of ``tool``, or None if unknown."""
        groups = {name: registry.handlers for name, registry in self._registries.items()}
        return self._generator.generate_for_group(tool, groups)

    def operation_schema(self, tool: str, operation: str) -> dict[str, Any]:
        """
        Schema for one operation.

        Raises:
            KeyError: If tool not found
            OperationNotFoundError: If the tool has no such operation
        """
        if tool not in self._registries:
            raise KeyError(f"Tool not found: {tool}")
        handler = self._registries[tool].get_handler(operation)
        return self._generator.generate_for_handler(handler)

    def compile_all(self) -> int:
        """
        Render every group and operation schema into the cache.

        Returns:
            Number of resources compiled

        Raises:
            SchemaGenerationError: If any declared result type is unsupported
        """
        count = 0
        for name, registry in self._registries.items():
            self.get_resource(f"{SCHEMA_URI_PREFIX}{name}")
            count += 1
            for operation in registry.operations:
                self.get_resource(f"{SCHEMA_URI_PREFIX}{name}/{operation}")
                count += 1
        logger.info(f"Schema resource registry: {count} schemas compiled for {SCHEMA_URI_PREFIX}*")
        return count

    def get_resource(self, uri: str) -> dict[str, str]:
        """
        Get resource by URI.

        Args:
            uri: Resource URI (e.g., "docops://schemas/email_content/get_body")

        Returns:
            Resource dict with uri, mimeType, text

        Raises:
            KeyError: If the URI doesn't name a schema resource
            OperationNotFoundError: If the operation doesn't exist
        """
        if uri in self._cache:
            return self._cache[uri]

        if not uri.startswith(SCHEMA_URI_PREFIX):
            raise KeyError(f"Not a schema resource: {uri}")

        parts = uri[len(SCHEMA_URI_PREFIX):].split("/")
        if len(parts) == 1 and parts[0]:
            schema = self.group_schema(parts[0])
            if schema is None:
                raise KeyError(f"Tool not found: {parts[0]}")
        elif len(parts) == 2 and all(parts):
            schema = self.operation_schema(parts[0], parts[1])
        else:
            raise KeyError(f"Not a schema resource: {uri}")

        resource = {
            "uri": uri,
            "mimeType": "application/json",
            "text": json.dumps(schema, indent=2),
        }
        self._cache[uri] = resource
        return resource

    def list_resources(self) -> list[dict[str, str]]:
        """List all available schema resources."""
        resources: list[dict[str, str]] = []
        for name in sorted(self._registries):
            resources.append({
                "uri": f"{SCHEMA_URI_PREFIX}{name}",
                "name": name,
                "description": f"Output schema for every {name} operation",
            })
            for operation in self._registries[name].operations:
                resources.append({
                    "uri": f"{SCHEMA_URI_PREFIX}{name}/{operation}",
                    "name": f"{name}/{operation}",
                    "description": f"Output schema for {name}(operation='{operation}')",
                })
        return resources


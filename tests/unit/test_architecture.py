"""
Architectural tests: enforce layer boundaries.

These tests verify that the codebase maintains proper separation of concerns:
- handlers/ is the generic dispatch framework; it knows nothing of schemas,
  result shapes, concrete operations or tools
- schemagen/ describes types; it never imports what it describes
- results/ are plain shapes; operations/ must not reach up into tools/
- tools/ and server.py wire everything together

This keeps the framework reusable for any document engine.
"""

import ast
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent

# Layers and their forbidden imports
LAYER_RULES = {
    "handlers": {"schemagen", "results", "operations", "tools", "resources", "server", "mcp"},
    "schemagen": {"handlers", "results", "operations", "tools", "resources", "server", "mcp"},
    "results": {"handlers", "operations", "tools", "resources", "server", "mcp"},
    "operations": {"tools", "resources", "server", "mcp"},
    # tools can import anything below server (it's the wiring layer)
    "tools": {"resources", "server", "mcp"},
}


def get_imports_from_file(filepath: Path) -> set[str]:
    """Extract all import names from a Python file."""
    try:
        with open(filepath) as f:
            tree = ast.parse(f.read(), filename=str(filepath))
    except SyntaxError:
        return set()

    imports = set()

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.add(alias.name.split(".")[0])
        elif isinstance(node, ast.ImportFrom):
            if node.module and node.level == 0:
                imports.add(node.module.split(".")[0])

    return imports


def get_python_files(directory: Path) -> list[Path]:
    """Get all Python files in a directory (non-recursive for top-level packages)."""
    if not directory.exists():
        return []
    return list(directory.glob("*.py"))


class TestLayerBoundaries:
    """Verify that layer boundaries are respected."""

    @pytest.mark.parametrize("layer,forbidden", list(LAYER_RULES.items()))
    def test_layer_does_not_import_forbidden(self, layer: str, forbidden: set[str]) -> None:
        """Each layer must not import from its forbidden layers."""
        layer_dir = PROJECT_ROOT / layer
        violations = []

        for filepath in get_python_files(layer_dir):
            imports = get_imports_from_file(filepath)
            bad_imports = imports & forbidden

            if bad_imports:
                violations.append(
                    f"{filepath.name} imports {bad_imports}"
                )

        assert not violations, (
            f"Layer '{layer}' has forbidden imports:\n" +
            "\n".join(f"  - {v}" for v in violations)
        )

    def test_framework_is_stdlib_only(self) -> None:
        """
        handlers/ and schemagen/ must only import the stdlib and shared
        top-level modules.

        The framework then runs under any transport, not just MCP.
        """
        allowed = {"handlers", "schemagen", "models", "validation", "logging_config"}
        stdlib_modules = getattr(sys, "stdlib_module_names", set())

        violations = []
        for layer in ("handlers", "schemagen"):
            for filepath in get_python_files(PROJECT_ROOT / layer):
                non_stdlib = get_imports_from_file(filepath) - stdlib_modules - allowed
                if non_stdlib:
                    violations.append(f"{layer}/{filepath.name} imports non-stdlib: {non_stdlib}")

        assert not violations, (
            "Framework must be stdlib only:\n" +
            "\n".join(f"  - {v}" for v in violations)
        )


class TestPackageStructure:
    """Verify expected package structure exists."""

    @pytest.mark.parametrize("package", ["handlers", "schemagen", "results", "operations", "tools", "resources"])
    def test_package_has_init(self, package: str) -> None:
        """Each package must have an __init__.py."""
        init_file = PROJECT_ROOT / package / "__init__.py"
        assert init_file.exists(), f"{package}/__init__.py missing"

    def test_config_is_not_package(self) -> None:
        """config/ should be data directory, not a Python package."""
        init_file = PROJECT_ROOT / "config" / "__init__.py"
        assert not init_file.exists(), (
            "config/__init__.py should not exist: it's a data directory"
        )

    def test_every_grouped_handler_is_exported(self) -> None:
        """HANDLER_GROUPS is the only registration list; nothing is discovered."""
        from operations import HANDLER_GROUPS
        from tools import REGISTRIES

        assert set(HANDLER_GROUPS) == set(REGISTRIES)
        for name, handlers in HANDLER_GROUPS.items():
            assert REGISTRIES[name].operations == [h.operation for h in handlers]

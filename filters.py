"""
Tool enablement policy.

Loads category rules from config/tool_categories.json (single source of
truth). Decides, per tool name, whether the server should register a tool
given the categories enabled for this process.
"""

import json
import logging
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONVERT_TO_PDF = "convert_to_pdf"
CONVERT_DOCUMENT = "convert_document"


@lru_cache(maxsize=1)
def get_category_config() -> dict[str, Any]:
    """
    Load category configuration from JSON file.

    Cached for performance - config doesn't change during runtime.
    """
    config_path = Path(__file__).parent / "config" / "tool_categories.json"
    config: dict[str, Any] = json.loads(config_path.read_text())
    return config


def known_categories() -> list[str]:
    """Category names, in configuration order."""
    return list(get_category_config()["categories"])


def normalize_category(name: str) -> str | None:
    """
    Map a user-supplied category name (or alias) to its canonical name.

    Returns:
        Canonical category name, or None if unknown
    """
    config = get_category_config()
    key = name.strip().lower()
    key = config.get("aliases", {}).get(key, key)
    return key if key in config["categories"] else None


class ToolFilter:
    """
    Answers "is this tool enabled?" for the server's registration pass.

    Rules:
    - A tool with a category prefix (word_, excel_, ppt_, pdf_, email_) is
      enabled iff its category is enabled
    - document_session is enabled iff sessions are enabled
    - convert_to_pdf needs at least one of word/excel/powerpoint
    - convert_document needs two or more document categories
    - Any other name is enabled; an empty name never is
    """

    def __init__(self, categories: Iterable[str], session_enabled: bool = False) -> None:
        enabled: set[str] = set()
        for name in categories:
            canonical = normalize_category(name)
            if canonical is None:
                logger.warning(f"Ignoring unknown tool category: {name!r}")
                continue
            enabled.add(canonical)
        self.categories = frozenset(enabled)
        self.session_enabled = session_enabled

    def __repr__(self) -> str:
        return f"ToolFilter(categories={sorted(self.categories)}, session_enabled={self.session_enabled})"

    def is_category_enabled(self, category: str) -> bool:
        return category in self.categories

    def is_tool_enabled(self, tool_name: str | None) -> bool:
        """
        Check whether a tool should be registered.

        Args:
            tool_name: Tool name, matched case-insensitively

        Returns:
            True if the tool is enabled under the current categories
        """
        if not tool_name:
            return False

        config = get_category_config()
        name = tool_name.lower()

        if name == config["session_tool"]:
            return self.session_enabled

        if name == CONVERT_TO_PDF:
            return any(c in self.categories for c in config["pdf_sources"])

        if name == CONVERT_DOCUMENT:
            documents = [c for c, rule in config["categories"].items() if rule.get("document")]
            return sum(1 for c in documents if c in self.categories) >= 2

        for category, rule in config["categories"].items():
            if name.startswith(rule["prefix"]):
                enabled = category in self.categories
                logger.debug(f"Filter: {tool_name} -> {category} ({'enabled' if enabled else 'disabled'})")
                return enabled

        return True

    def enabled_categories(self) -> str:
        """
        Human-readable list of what's enabled, for the start-up banner.

        Returns:
            Comma-separated labels (e.g. "Word, PDF, Session"), or "None"
        """
        config = get_category_config()
        labels = [
            rule["label"]
            for category, rule in config["categories"].items()
            if category in self.categories
        ]
        if self.session_enabled:
            labels.append(config["session_label"])
        return ", ".join(labels) if labels else "None"

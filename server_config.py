"""
Server configuration from the environment.

- DOCOPS_TOOLS: comma-separated categories, or "all" (default)
- DOCOPS_SESSION_ENABLED: true/false/1/0/yes/no (default false)
- DOCOPS_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default INFO)
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from filters import ToolFilter, known_categories, normalize_category
from models import ConfigurationError

logger = logging.getLogger(__name__)

TOOLS_ENV = "DOCOPS_TOOLS"
SESSION_ENV = "DOCOPS_SESSION_ENABLED"
LOG_LEVEL_ENV = "DOCOPS_LOG_LEVEL"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(
        f"{name} must be a boolean (true/false/1/0/yes/no), got {raw!r}",
        details={"variable": name},
    )


def parse_categories(raw: str) -> tuple[str, ...]:
    """
    Parse a DOCOPS_TOOLS value.

    "all" (any case) enables every category. Unknown names are dropped
    with a warning rather than failing start-up.
    """
    names = [part.strip() for part in raw.split(",") if part.strip()]
    if any(name.lower() == "all" for name in names):
        return tuple(known_categories())

    categories: list[str] = []
    for name in names:
        canonical = normalize_category(name)
        if canonical is None:
            logger.warning(f"{TOOLS_ENV}: ignoring unknown category {name!r}")
        elif canonical not in categories:
            categories.append(canonical)
    return tuple(categories)


@dataclass(frozen=True)
class ServerConfig:
    """Process-wide settings, read once at start-up."""
    categories: tuple[str, ...] = field(default_factory=lambda: tuple(known_categories()))
    session_enabled: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServerConfig":
        """
        Build config from environment variables.

        Args:
            environ: Mapping to read instead of os.environ (tests)

        Raises:
            ConfigurationError: On a malformed boolean
        """
        env = os.environ if environ is None else environ
        return cls(
            categories=parse_categories(env.get(TOOLS_ENV, "all")),
            session_enabled=parse_bool(SESSION_ENV, env.get(SESSION_ENV, "false")),
            log_level=env.get(LOG_LEVEL_ENV, "INFO").strip().upper() or "INFO",
        )

    def tool_filter(self) -> ToolFilter:
        return ToolFilter(self.categories, session_enabled=self.session_enabled)

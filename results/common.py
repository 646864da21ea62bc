"""Result shapes shared by every tool."""

from dataclasses import dataclass


@dataclass
class SuccessResult:
    """Confirmation that a modifying operation completed."""
    message: str

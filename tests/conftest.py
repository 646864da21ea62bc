"""
Shared pytest fixtures for docops tests.

Message files are written to tmp_path from the builders in tests/helpers.py.
"""

from pathlib import Path

import pytest

from tests.helpers import build_multipart_message, build_plain_message, write_message


# ============================================================================
# Message Fixtures
# ============================================================================

@pytest.fixture
def plain_eml(tmp_path: Path) -> str:
    """Path to a single-part plain text message."""
    return write_message(tmp_path / "plain.eml", build_plain_message())


@pytest.fixture
def multipart_eml(tmp_path: Path) -> str:
    """Path to a multipart message with two attachments."""
    return write_message(tmp_path / "multipart.eml", build_multipart_message())


@pytest.fixture
def attachment_file(tmp_path: Path) -> Path:
    """A small CSV file to attach."""
    path = tmp_path / "figures.csv"
    path.write_bytes(b"year,value\n1843,42\n")
    return path

"""Fixtures for statement unit tests."""

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def mock_cursor() -> MagicMock:
    """Mock DB-API cursor with ``callproc`` and ``nextset``."""
    cursor = MagicMock()
    cursor.description = None
    cursor.rowcount = 0
    cursor.arraysize = 1
    cursor.callproc = MagicMock(return_value=None)
    cursor.nextset = MagicMock(return_value=None)
    return cursor


@pytest.fixture
def mock_connection(mock_cursor: MagicMock) -> MagicMock:
    """Mock DB-API connection handing out ``mock_cursor``."""
    conn = MagicMock()
    conn.cursor = MagicMock(return_value=mock_cursor)
    conn.commit = MagicMock()
    conn.rollback = MagicMock()
    conn.close = MagicMock()
    return conn

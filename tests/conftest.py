from __future__ import annotations

import sqlite3
from collections.abc import Generator
from pathlib import Path

import pytest

from stmtspec.config import reset_global_config

here = Path(__file__).parent
root_path = here.parent

CITY_ROWS = [(1, "Rome", 2873000), (2, "Paris", 2161000), (3, "Vienna", 1897000)]


@pytest.fixture(autouse=True)
def _reset_config() -> Generator[None, None, None]:
    """Every test starts and ends with the default global configuration."""
    reset_global_config()
    yield
    reset_global_config()


@pytest.fixture
def connection() -> Generator[sqlite3.Connection, None, None]:
    """In-memory sqlite3 database holding a small ``city`` table."""
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE city (id INTEGER PRIMARY KEY, name TEXT NOT NULL UNIQUE, population INTEGER)")
    conn.executemany("INSERT INTO city (id, name, population) VALUES (?, ?, ?)", CITY_ROWS)
    conn.commit()
    yield conn
    conn.close()

import sqlite3
from unittest.mock import MagicMock

import pytest

from stmtspec.exceptions import DriverError, StatementClosedError
from stmtspec.statement import StatementGroup

pytestmark = pytest.mark.sqlite


def test_statements_share_the_connection(connection: sqlite3.Connection) -> None:
    with StatementGroup(connection) as group:
        insert = group.prepared_statement("INSERT INTO city (name) VALUES (:name)", named=True)
        insert.param("name").set("Oslo")
        insert.update().run().require_count(1)

        count = group.static_statement().query("SELECT COUNT(*) FROM city").row().col()

        assert count == 4
        assert len(group) == 2
        assert insert.connection is connection


def test_close_closes_statements(connection: sqlite3.Connection) -> None:
    group = StatementGroup(connection)
    static = group.static_statement()
    prepared = group.prepared_statement("SELECT 1")

    group.close()

    assert group.is_closed
    assert static.is_closed
    assert prepared.is_closed
    assert connection.execute("SELECT 1").fetchone() == (1,)
    with pytest.raises(StatementClosedError):
        group.static_statement()


def test_close_statements_keeps_group_open(connection: sqlite3.Connection) -> None:
    with StatementGroup(connection) as group:
        static = group.static_statement()
        group.close_statements()

        assert static.is_closed
        assert not group.is_closed
        assert len(group) == 0


def test_owned_connection_is_closed_once(mock_connection: MagicMock) -> None:
    with StatementGroup(lambda: mock_connection) as group:
        group.static_statement().update("DELETE FROM a").run()
        group.callable_statement("proc")

    mock_connection.close.assert_called_once_with()


def test_close_continues_after_failure(mock_connection: MagicMock, mock_cursor: MagicMock) -> None:
    mock_cursor.close.side_effect = sqlite3.OperationalError("close failed")
    group = StatementGroup(mock_connection, close_connection=True)
    group.static_statement().update("DELETE FROM a").run()
    group.static_statement().update("DELETE FROM b").run()

    with pytest.raises(DriverError) as exc_info:
        group.close()

    assert len(exc_info.value.suppressed) == 1
    mock_connection.close.assert_called_once_with()

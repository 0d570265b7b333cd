"""Unit tests for StaticStatement against an in-memory sqlite3 database."""

import sqlite3
from unittest.mock import MagicMock

import pytest

from stmtspec.exceptions import DriverError, DriverErrorType, InvalidResultError, StatementClosedError
from stmtspec.statement import StaticStatement

pytestmark = pytest.mark.sqlite


def test_query_rows(connection: sqlite3.Connection) -> None:
    with StaticStatement(connection) as stmt:
        names = stmt.query("SELECT name FROM city ORDER BY id").rows().col()

    assert names == ["Rome", "Paris", "Vienna"]


def test_query_single_row(connection: sqlite3.Connection) -> None:
    with StaticStatement(connection) as stmt:
        row = stmt.query("SELECT id, name FROM city WHERE id = 2").row().required().map()

    assert row == {"id": 2, "name": "Paris"}


def test_update_count(connection: sqlite3.Connection) -> None:
    with StaticStatement(connection) as stmt:
        count = stmt.update("UPDATE city SET population = population + 1 WHERE id < 3").count()

    assert count == 2


def test_update_generated_key(connection: sqlite3.Connection) -> None:
    with StaticStatement(connection) as stmt:
        result = stmt.update("INSERT INTO city (name, population) VALUES ('Oslo', 709000)").run_get_key()

    assert result.count == 1
    assert result.require_value() == 4


def test_execute_distinguishes_query_and_update(connection: sqlite3.Connection) -> None:
    with StaticStatement(connection) as stmt:
        query_result = stmt.execute("SELECT id FROM city").run()
        assert query_result.is_query_result
        assert query_result.update_count == -1
        assert [row[0] for row in query_result.query_result()] == [1, 2, 3]

        update_result = stmt.execute("DELETE FROM city WHERE id = 3").run()
        assert update_result.is_update_result
        assert update_result.update_count == 1
        assert update_result.next() is False


def test_static_batch(connection: sqlite3.Connection) -> None:
    with StaticStatement(connection) as stmt:
        batch = stmt.batch()
        batch.add("UPDATE city SET population = 0 WHERE id = 1").add("DELETE FROM city WHERE id > 1")
        assert len(batch) == 2

        result = batch.run()

    assert result.counts == (1, 2)
    assert result.total_count == 3
    assert len(batch) == 0


def test_batch_is_cleared_when_it_fails(connection: sqlite3.Connection) -> None:
    with StaticStatement(connection) as stmt:
        batch = stmt.batch().add("INSERT INTO city (id, name) VALUES (1, 'Duplicate')")

        with pytest.raises(DriverError):
            batch.run()

        assert len(batch) == 0


def test_driver_errors_are_translated(connection: sqlite3.Connection) -> None:
    with StaticStatement(connection) as stmt:
        with pytest.raises(DriverError) as exc_info:
            stmt.update("INSERT INTO city (id, name) VALUES (1, 'Rome')").run()

    assert exc_info.value.error_type is DriverErrorType.INTEGRITY
    assert isinstance(exc_info.value.__cause__, sqlite3.IntegrityError)


def test_query_on_update_command_raises(connection: sqlite3.Connection) -> None:
    with StaticStatement(connection) as stmt:
        with pytest.raises(InvalidResultError, match="result set"):
            stmt.query("UPDATE city SET population = 1").rows().col()


def test_none_sql_is_rejected(connection: sqlite3.Connection) -> None:
    with StaticStatement(connection) as stmt:
        with pytest.raises(ValueError, match="sql is None"):
            stmt.update(None).run()  # type: ignore[arg-type]


def test_closed_statement_raises(connection: sqlite3.Connection) -> None:
    stmt = StaticStatement(connection)
    stmt.close()
    stmt.close()

    assert stmt.is_closed
    assert not stmt.is_initialized
    with pytest.raises(StatementClosedError):
        stmt.query("SELECT 1").rows().col()
    with pytest.raises(StatementClosedError):
        stmt.connection  # noqa: B018


def test_close_keeps_passed_connection_open(connection: sqlite3.Connection) -> None:
    with StaticStatement(connection) as stmt:
        stmt.update("DELETE FROM city WHERE id = 3").run()

    assert connection.execute("SELECT COUNT(*) FROM city").fetchone() == (2,)


def test_connection_factory_is_owned(mock_connection: MagicMock) -> None:
    """Test a connection created by a factory is closed with the statement."""
    stmt = StaticStatement(lambda: mock_connection)

    assert stmt.closes_connection
    stmt.close()

    mock_connection.close.assert_called_once_with()


def test_close_connection_override(mock_connection: MagicMock) -> None:
    StaticStatement(mock_connection, close_connection=True).close()

    mock_connection.close.assert_called_once_with()


def test_cursor_is_created_lazily_and_reused(mock_connection: MagicMock, mock_cursor: MagicMock) -> None:
    stmt = StaticStatement(mock_connection)
    mock_connection.cursor.assert_not_called()

    stmt.update("DELETE FROM a").run()
    stmt.update("DELETE FROM b").run()

    mock_connection.cursor.assert_called_once_with()
    assert mock_cursor.execute.call_count == 2
    stmt.close()
    mock_cursor.close.assert_called_once_with()
    mock_connection.close.assert_not_called()


def test_fetch_size_applied_to_cursor(mock_connection: MagicMock, mock_cursor: MagicMock) -> None:
    stmt = StaticStatement(mock_connection)
    stmt.options.set_fetch_size(250)
    stmt.update("DELETE FROM a").run()

    assert mock_cursor.arraysize == 250

    stmt.options.fetch_size = 10
    assert mock_cursor.arraysize == 10


def test_close_errors_are_combined(mock_connection: MagicMock, mock_cursor: MagicMock) -> None:
    mock_cursor.close.side_effect = sqlite3.OperationalError("cursor close failed")
    mock_connection.close.side_effect = RuntimeError("connection close failed")
    stmt = StaticStatement(mock_connection, close_connection=True)
    stmt.update("DELETE FROM a").run()

    with pytest.raises(DriverError) as exc_info:
        stmt.close()

    assert len(exc_info.value.suppressed) == 1
    assert stmt.is_closed


def test_invalid_connection_source() -> None:
    with pytest.raises(ValueError, match="connection is None"):
        StaticStatement(None)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        StaticStatement(42)  # type: ignore[arg-type]

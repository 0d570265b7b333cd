"""Unit tests for reading query results."""

import sqlite3
from unittest.mock import MagicMock

import pytest

from stmtspec.exceptions import IllegalStateError, InvalidResultError, ProcessingError, StatementClosedError
from stmtspec.statement import Query, QueryCursor, StaticStatement


def _query(connection: sqlite3.Connection, sql: str = "SELECT id, name, population FROM city ORDER BY id") -> Query:
    return StaticStatement(connection).query(sql)


def test_cursor_navigation(connection: sqlite3.Connection) -> None:
    with _query(connection).cursor() as qc:
        assert qc.column_names == ("id", "name", "population")
        assert qc.column_count == 3
        assert qc.row_number == 0

        assert qc.next()
        assert qc.row_number == 1
        assert qc.col() == 1
        assert qc.col("name") == "Rome"
        assert qc.col(3) == 2873000

    assert qc.is_closed


def test_column_lookup_falls_back_to_case_insensitive(connection: sqlite3.Connection) -> None:
    with _query(connection, "SELECT id AS Id, name AS id FROM city WHERE id = 1").cursor() as qc:
        qc.next()

        assert qc.col("Id") == 1
        assert qc.col("id") == "Rome"
        assert qc.col("ID") == 1


def test_column_errors(connection: sqlite3.Connection) -> None:
    with _query(connection).cursor() as qc:
        with pytest.raises(IllegalStateError, match="next"):
            qc.col()

        qc.next()
        with pytest.raises(ValueError, match=">= 1"):
            qc.col(0)
        with pytest.raises(InvalidResultError, match="out of range"):
            qc.col(4)
        with pytest.raises(InvalidResultError, match="missing"):
            qc.col("missing")


def test_col_converter_skips_null(connection: sqlite3.Connection) -> None:
    connection.execute("INSERT INTO city (id, name) VALUES (4, 'Atlantis')")

    populations = _query(connection, "SELECT population FROM city ORDER BY id").rows().col(converter=str)

    assert populations == ["2873000", "2161000", "1897000", None]


def test_cols_and_map(connection: sqlite3.Connection) -> None:
    with _query(connection).cursor() as qc:
        qc.next()

        assert qc.cols() == (1, "Rome", 2873000)
        assert qc.cols("name", 1) == ("Rome", 1)
        assert qc.map("name") == {"name": "Rome"}
        assert qc.map() == {"id": 1, "name": "Rome", "population": 2873000}


def test_iteration_yields_row_tuples(connection: sqlite3.Connection) -> None:
    with _query(connection, "SELECT id FROM city ORDER BY id").cursor() as qc:
        assert list(qc) == [(1,), (2,), (3,)]


def test_closed_cursor(connection: sqlite3.Connection) -> None:
    qc = _query(connection).cursor()
    qc.close()

    with pytest.raises(StatementClosedError):
        qc.next()


def test_skip_and_max_rows(connection: sqlite3.Connection) -> None:
    """Test skipped rows do not count against the row limit."""
    assert _query(connection).skip(1).max_rows(1).rows().col() == [2]
    assert _query(connection).skip(5).rows().col() == []
    assert _query(connection).rows(max_rows=2).col("name") == ["Rome", "Paris"]


def test_negative_limits_are_rejected(connection: sqlite3.Connection) -> None:
    query = _query(connection)

    with pytest.raises(ValueError):
        query.skip(-1)
    with pytest.raises(ValueError):
        query.max_rows(-1)
    with pytest.raises(ValueError):
        query.rows(max_rows=-1)


def test_one_row(connection: sqlite3.Connection) -> None:
    assert _query(connection).row().cols("name", "population") == ("Rome", 2873000)
    assert _query(connection, "SELECT id FROM city WHERE id = 9").row().col() is None
    assert _query(connection, "SELECT id FROM city WHERE id = 9").row().read(lambda qc: qc.col(), empty=-1) == -1


def test_one_row_required(connection: sqlite3.Connection) -> None:
    with pytest.raises(InvalidResultError, match="no rows"):
        _query(connection, "SELECT id FROM city WHERE id = 9").row().required().col()


def test_one_row_unique(connection: sqlite3.Connection) -> None:
    assert _query(connection, "SELECT id FROM city WHERE id = 2").row().unique().col() == 2

    with pytest.raises(InvalidResultError, match="more than one row"):
        _query(connection).row().unique().col()


def test_one_row_ignores_max_rows(connection: sqlite3.Connection) -> None:
    with pytest.raises(InvalidResultError):
        _query(connection).max_rows(1).row().unique().col()


def test_for_each(connection: sqlite3.Connection) -> None:
    seen: list[str] = []

    _query(connection).rows().for_each(lambda qc: seen.append(qc.col("name")))

    assert seen == ["Rome", "Paris", "Vienna"]


def test_reader_errors_are_translated(connection: sqlite3.Connection) -> None:
    with pytest.raises(ProcessingError, match="ZeroDivisionError") as exc_info:
        _query(connection).rows().read(lambda qc: qc.col() / 0)

    assert isinstance(exc_info.value.__cause__, ZeroDivisionError)


def test_query_cursor_requires_result_set() -> None:
    cursor = MagicMock()
    cursor.description = None

    with pytest.raises(InvalidResultError):
        QueryCursor(cursor)

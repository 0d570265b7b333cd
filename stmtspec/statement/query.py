"""Query builders and the cursor wrapper used to read result rows.

Columns are addressed like parameters: by 1-based index or by name. Name
lookup is exact first and falls back to a case-insensitive match.
"""

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from typing_extensions import TypeVar

from stmtspec.exceptions import IllegalStateError, InvalidResultError, StatementClosedError, wrap_driver_errors

if TYPE_CHECKING:
    from types import TracebackType

    from typing_extensions import Self

    from stmtspec.protocols import CursorProtocol

__all__ = ("Column", "Query", "QueryCursor", "QueryOneRow", "QueryRows")

T = TypeVar("T")

Column = Union[int, str]


class QueryCursor:
    """Forward-only view of a query result.

    Call :meth:`next` to move to the next row, then read its columns::

        while qc.next():
            name = qc.col("name")

    Iterating a ``QueryCursor`` yields each row as a tuple.

    Args:
        cursor: A DB-API cursor on which a query has just been executed.
        max_rows: Maximum number of rows delivered, ``0`` for no limit.

    Raises:
        InvalidResultError: If the executed command did not produce a result set.
    """

    __slots__ = (
        "_closed",
        "_column_lookup",
        "_column_names",
        "_cursor",
        "_folded_lookup",
        "_max_rows",
        "_row",
        "_row_count",
    )

    def __init__(self, cursor: "CursorProtocol", max_rows: int = 0) -> None:
        description = cursor.description
        if description is None:
            msg = "command did not return a result set"
            raise InvalidResultError(msg)
        self._cursor = cursor
        self._max_rows = max_rows
        self._column_names = tuple(str(column[0]) for column in description)
        self._column_lookup: dict[str, int] = {}
        for position, name in enumerate(self._column_names):
            self._column_lookup.setdefault(name, position)
        self._folded_lookup: dict[str, int] = {}
        for position, name in enumerate(self._column_names):
            self._folded_lookup.setdefault(name.lower(), position)
        self._row: Optional[tuple[Any, ...]] = None
        self._row_count = 0
        self._closed = False

    @property
    def column_names(self) -> "tuple[str, ...]":
        return self._column_names

    @property
    def column_count(self) -> int:
        return len(self._column_names)

    @property
    def row_number(self) -> int:
        """1-based number of the current row, ``0`` before the first row."""
        return self._row_count

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def row(self) -> "tuple[Any, ...]":
        """The values of the current row.

        Raises:
            IllegalStateError: If the cursor is not positioned on a row.
        """
        if self._row is None:
            msg = "cursor is not positioned on a row, call next() first"
            raise IllegalStateError(msg)
        return self._row

    def next(self) -> bool:
        """Move to the next row.

        Returns:
            False once the result, or the ``max_rows`` limit, is exhausted.
        """
        self._check_open()
        if self._max_rows and self._row_count >= self._max_rows:
            self._row = None
            return False
        self._row = self._fetch()
        if self._row is None:
            return False
        self._row_count += 1
        return True

    def skip(self, count: int) -> int:
        """Discard up to ``count`` rows without counting them as delivered.

        Returns:
            The number of rows actually skipped.
        """
        self._check_open()
        skipped = 0
        while skipped < count and self._fetch() is not None:
            skipped += 1
        return skipped

    def _fetch(self) -> "Optional[tuple[Any, ...]]":
        with wrap_driver_errors():
            row = self._cursor.fetchone()
        return None if row is None else tuple(row)

    def column_position(self, column: Column) -> int:
        """Resolve a 1-based index or a name to a 0-based offset into :attr:`row`."""
        if isinstance(column, int):
            if column < 1:
                msg = f"column index must be >= 1, is {column}"
                raise ValueError(msg)
            if column > len(self._column_names):
                msg = f"column index {column} out of range, result has {len(self._column_names)} column(s)"
                raise InvalidResultError(msg)
            return column - 1
        position = self._column_lookup.get(column)
        if position is None:
            position = self._folded_lookup.get(column.lower())
        if position is None:
            msg = f"result has no column {column!r}"
            raise InvalidResultError(msg)
        return position

    def col(self, column: Column = 1, converter: "Optional[Callable[[Any], Any]]" = None) -> Any:
        """Value of a column in the current row.

        ``None`` values are returned as is; other values pass through ``converter``.
        """
        value = self.row[self.column_position(column)]
        if converter is not None and value is not None:
            return converter(value)
        return value

    def cols(self, *columns: Column) -> "tuple[Any, ...]":
        """Values of the given columns, or of all columns if none are given."""
        row = self.row
        if not columns:
            return row
        return tuple(row[self.column_position(column)] for column in columns)

    def map(self, *names: str) -> "dict[str, Any]":
        """The current row as a ``{column name: value}`` dict."""
        row = self.row
        if not names:
            return dict(zip(self._column_names, row))
        return {name: row[self.column_position(name)] for name in names}

    def close(self) -> None:
        self._closed = True
        self._row = None

    def _check_open(self) -> None:
        if self._closed:
            msg = "query cursor already closed"
            raise StatementClosedError(msg)

    def __iter__(self) -> "Iterator[tuple[Any, ...]]":
        while self.next():
            yield self.row

    def __enter__(self) -> "Self":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(columns={self._column_names!r}, row_number={self._row_count})"


class Query:
    """Builder that runs a query and reads its result.

    Args:
        runner: Executes the query and returns the cursor holding the result.
        max_rows: Default row limit, typically the statement's ``options.max_rows``.
    """

    __slots__ = ("_max_rows", "_runner", "_skip")

    def __init__(self, runner: "Callable[[], CursorProtocol]", max_rows: int = 0) -> None:
        self._runner = runner
        self._max_rows = max_rows
        self._skip = 0

    def skip(self, count: int) -> "Query":
        """Skip the first ``count`` rows of the result."""
        if count < 0:
            msg = f"skip count must not be negative, is {count}"
            raise ValueError(msg)
        self._skip = count
        return self

    def max_rows(self, count: int) -> "Query":
        """Deliver at most ``count`` rows (after skipping), ``0`` for no limit."""
        if count < 0:
            msg = f"max_rows must not be negative, is {count}"
            raise ValueError(msg)
        self._max_rows = count
        return self

    def cursor(self, max_rows: "Optional[int]" = None) -> QueryCursor:
        """Execute the query and return a cursor over its result."""
        cursor = self._runner()
        query_cursor = QueryCursor(cursor, self._max_rows if max_rows is None else max_rows)
        if self._skip:
            query_cursor.skip(self._skip)
        return query_cursor

    def read(self, reader: "Callable[[QueryCursor], T]", max_rows: "Optional[int]" = None) -> T:
        """Execute the query and pass the result cursor to ``reader``.

        Exceptions raised by ``reader`` are translated into stmtspec exceptions.
        """
        with self.cursor(max_rows) as query_cursor, wrap_driver_errors():
            return reader(query_cursor)

    def row(self) -> "QueryOneRow":
        """Access the first row of the result."""
        return QueryOneRow(self)

    def rows(self, max_rows: "Optional[int]" = None) -> "QueryRows":
        """Access all rows, or up to ``max_rows`` rows, of the result."""
        if max_rows is not None and max_rows < 0:
            msg = f"max_rows must not be negative, is {max_rows}"
            raise ValueError(msg)
        return QueryRows(self, max_rows)


class QueryOneRow:
    """Reads the first row of a query result."""

    __slots__ = ("_query", "_required", "_unique")

    def __init__(self, query: Query) -> None:
        self._query = query
        self._required = False
        self._unique = False

    def required(self) -> "QueryOneRow":
        """Raise :class:`InvalidResultError` if the result is empty."""
        self._required = True
        return self

    def unique(self) -> "QueryOneRow":
        """Raise :class:`InvalidResultError` if the result has more than one row."""
        self._unique = True
        return self

    def read(self, reader: "Callable[[QueryCursor], T]", empty: "Optional[T]" = None) -> "Optional[T]":
        """Apply ``reader`` to the first row.

        Returns:
            The reader's value, or ``empty`` if there is no row and the row is not required.
        """

        def read_first(query_cursor: QueryCursor) -> "Optional[T]":
            if not query_cursor.next():
                if self._required:
                    msg = "query returned no rows"
                    raise InvalidResultError(msg)
                return empty
            value = reader(query_cursor)
            if self._unique and query_cursor.next():
                msg = "query returned more than one row"
                raise InvalidResultError(msg)
            return value

        return self._query.read(read_first, max_rows=0)

    def col(self, column: Column = 1, converter: "Optional[Callable[[Any], Any]]" = None) -> Any:
        return self.read(lambda qc: qc.col(column, converter))

    def cols(self, *columns: Column) -> "Optional[tuple[Any, ...]]":
        return self.read(lambda qc: qc.cols(*columns))

    def map(self, *names: str) -> "Optional[dict[str, Any]]":
        return self.read(lambda qc: qc.map(*names))


class QueryRows:
    """Reads all rows of a query result into lists."""

    __slots__ = ("_max_rows", "_query")

    def __init__(self, query: Query, max_rows: "Optional[int]" = None) -> None:
        self._query = query
        self._max_rows = max_rows

    def read(self, reader: "Callable[[QueryCursor], T]") -> "list[T]":
        """Apply ``reader`` to every row and collect the results."""

        def read_all(query_cursor: QueryCursor) -> "list[T]":
            result = []
            while query_cursor.next():
                result.append(reader(query_cursor))
            return result

        return self._query.read(read_all, max_rows=self._max_rows)

    def for_each(self, consumer: "Callable[[QueryCursor], Any]") -> None:
        def consume_all(query_cursor: QueryCursor) -> None:
            while query_cursor.next():
                consumer(query_cursor)

        self._query.read(consume_all, max_rows=self._max_rows)

    def col(self, column: Column = 1, converter: "Optional[Callable[[Any], Any]]" = None) -> "list[Any]":
        return self.read(lambda qc: qc.col(column, converter))

    def cols(self, *columns: Column) -> "list[tuple[Any, ...]]":
        return self.read(lambda qc: qc.cols(*columns))

    def map(self, *names: str) -> "list[dict[str, Any]]":
        return self.read(lambda qc: qc.map(*names))

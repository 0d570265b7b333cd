"""A set of statements sharing one connection."""

from typing import TYPE_CHECKING, Optional, Union

from typing_extensions import TypeVar

from stmtspec.exceptions import StatementClosedError, combine_errors
from stmtspec.statement._base import resolve_connection
from stmtspec.statement.callable import CallableStatement
from stmtspec.statement.prepared import PreparedStatement
from stmtspec.statement.static import StaticStatement

if TYPE_CHECKING:
    from types import TracebackType

    from typing_extensions import Self

    from stmtspec.config import StatementConfig
    from stmtspec.parameters import NamedParameterPlan
    from stmtspec.protocols import ConnectionProtocol
    from stmtspec.statement._base import ConnectionSource, Statement

__all__ = ("StatementGroup",)

StatementT = TypeVar("StatementT", bound="Statement")


class StatementGroup:
    """Creates statements on a shared connection and closes them together.

    Statements created by the group never close the connection themselves;
    :meth:`close` does that once, after closing every statement, if the group
    owns the connection.

    Args:
        connection: A DB-API connection, or a zero-argument callable returning one.
        close_connection: Whether :meth:`close` closes the connection.
            Defaults to ``False`` for a connection and ``True`` for a factory.
        config: Passed on to every statement created by the group.
    """

    def __init__(
        self,
        connection: "ConnectionSource",
        *,
        close_connection: "Optional[bool]" = None,
        config: "Optional[StatementConfig]" = None,
    ) -> None:
        self._connection: Optional[ConnectionProtocol]
        self._connection, self._close_connection = resolve_connection(connection, close_connection)
        self._config = config
        self._statements: list[Statement] = []

    @property
    def is_closed(self) -> bool:
        return self._connection is None

    @property
    def connection(self) -> "ConnectionProtocol":
        if self._connection is None:
            msg = "statement group already closed"
            raise StatementClosedError(msg)
        return self._connection

    def __len__(self) -> int:
        return len(self._statements)

    def static_statement(self) -> StaticStatement:
        return self._add(StaticStatement(self.connection, close_connection=False, config=self._config))

    def prepared_statement(
        self, sql: "Optional[Union[str, NamedParameterPlan]]" = None, *, named: "Optional[bool]" = None
    ) -> PreparedStatement:
        """Create a prepared statement, initialized with ``sql`` if given."""
        statement = self._add(PreparedStatement(self.connection, close_connection=False, config=self._config))
        if sql is not None:
            statement.init(sql, named=named)
        return statement

    def callable_statement(self, procname: "Optional[str]" = None) -> CallableStatement:
        """Create a callable statement, initialized with ``procname`` if given."""
        statement = self._add(CallableStatement(self.connection, close_connection=False, config=self._config))
        if procname is not None:
            statement.init(procname)
        return statement

    def _add(self, statement: StatementT) -> StatementT:
        self._statements.append(statement)
        return statement

    def close_statements(self) -> None:
        """Close all statements created so far, keeping the group open."""
        statements, self._statements = self._statements, []
        errors: list[BaseException] = []
        for statement in statements:
            try:
                statement.close()
            except Exception as e:
                errors.append(e)
        error = combine_errors(*errors)
        if error is not None:
            raise error

    def close(self) -> None:
        """Close all statements, then the connection if the group owns it."""
        if self._connection is None:
            return
        connection, self._connection = self._connection, None
        errors: list[BaseException] = []
        try:
            self.close_statements()
        except Exception as e:
            errors.append(e)
        if self._close_connection:
            try:
                connection.close()
            except Exception as e:
                errors.append(e)
        error = combine_errors(*errors)
        if error is not None:
            raise error

    def __enter__(self) -> "Self":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()

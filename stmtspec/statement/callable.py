"""Statements calling stored procedures through the DB-API ``callproc`` extension."""

import logging
from typing import TYPE_CHECKING, Any, Optional

from stmtspec.exceptions import IllegalStateError, wrap_driver_errors
from stmtspec.statement._base import ParameterizedStatement, logger
from stmtspec.statement.prepared import IndexedParam
from stmtspec.statement.query import Query
from stmtspec.statement.runnable import Execute
from stmtspec.utils.logging import log_with_context
from stmtspec.utils.type_guards import has_callproc

if TYPE_CHECKING:
    from typing_extensions import Self

    from stmtspec.config import StatementConfig
    from stmtspec.protocols import CursorProtocol
    from stmtspec.statement._base import ConnectionSource

__all__ = ("CallableStatement",)


class CallableStatement(ParameterizedStatement):
    """Calls a stored procedure with positional parameters.

    Output values come back through :attr:`ExecuteResult.out_params
    <stmtspec.statement.result.ExecuteResult.out_params>`, the sequence the
    driver's ``callproc`` returns::

        stmt = CallableStatement(connection).init("get_city_count")
        stmt.params("Rome", None)
        count = stmt.execute().run().out_params[1]

    Drivers without ``callproc`` (``sqlite3`` among them) raise
    :class:`~stmtspec.exceptions.IllegalStateError` when the call runs.
    """

    def __init__(
        self,
        connection: "ConnectionSource",
        *,
        close_connection: "Optional[bool]" = None,
        config: "Optional[StatementConfig]" = None,
    ) -> None:
        super().__init__(connection, close_connection=close_connection, config=config)
        self._procname: Optional[str] = None
        self._out_params: tuple[Any, ...] = ()

    def init(self, procname: str) -> "Self":
        """Initialize the statement to call ``procname``, replacing any previous procedure."""
        if not procname:
            msg = "procname must not be empty"
            raise ValueError(msg)
        self._check_open()
        self._procname = None
        self._values = []
        self._out_params = ()
        self._open_cursor()
        self._procname = procname
        return self

    @property
    def is_initialized(self) -> bool:
        return super().is_initialized and self._procname is not None

    def _check_initialized(self) -> None:
        super()._check_initialized()
        if self._procname is None:
            msg = "statement is not initialized"
            raise IllegalStateError(msg)

    @property
    def procname(self) -> str:
        self._check_initialized()
        return self._procname  # type: ignore[return-value]

    def param(self, index: int) -> IndexedParam:
        self._check_initialized()
        return IndexedParam(self, index)

    def _describe(self) -> "Optional[str]":
        return self._procname

    def _call(self) -> "CursorProtocol":
        cursor = self.cursor
        if not has_callproc(cursor):
            msg = f"driver cursor {type(cursor).__name__} does not support callproc"
            raise IllegalStateError(msg)
        values = self._bound_values()
        log_with_context(
            logger, logging.DEBUG, "Calling procedure", procedure=self._procname, parameter_count=len(values)
        )
        with wrap_driver_errors():
            result = cursor.callproc(self._procname, values)
        self._out_params = tuple(result) if result is not None else values
        return cursor

    def _last_out_params(self) -> "tuple[Any, ...]":
        return self._out_params

    def execute(self) -> Execute:
        self._check_initialized()
        return Execute(self._call, self.options.max_rows, self._last_out_params)

    def query(self) -> Query:
        """Call the procedure and read the result set it produces."""
        self._check_initialized()
        return Query(self._call, self.options.max_rows)

    def call(self) -> "tuple[Any, ...]":
        """Call the procedure and return the output parameter values."""
        return self.execute().run().out_params

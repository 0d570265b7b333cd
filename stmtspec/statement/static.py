"""Statements running literal SQL commands without parameters."""

from typing import TYPE_CHECKING

from stmtspec.exceptions import wrap_driver_errors
from stmtspec.statement._base import Statement, logger
from stmtspec.utils.logging import log_statement
from stmtspec.statement.query import Query
from stmtspec.statement.result import BatchResult
from stmtspec.statement.runnable import Batch, Execute, Update

if TYPE_CHECKING:
    from stmtspec.protocols import CursorProtocol

__all__ = ("StaticBatch", "StaticStatement")


class StaticStatement(Statement):
    """Runs SQL commands given as complete text.

    The underlying cursor is opened on first use and reused afterwards::

        with StaticStatement(connection) as stmt:
            count = stmt.update("DELETE FROM city").count()
            names = stmt.query("SELECT name FROM city").rows().col()
    """

    @property
    def is_initialized(self) -> bool:
        return not self.is_closed

    @property
    def cursor(self) -> "CursorProtocol":
        return self._ensure_cursor()

    def _ensure_cursor(self) -> "CursorProtocol":
        self._check_open()
        if self._cursor is None:
            return self._open_cursor()
        return self._cursor

    def _execute(self, sql: str) -> "CursorProtocol":
        if sql is None:
            msg = "sql is None"
            raise ValueError(msg)
        cursor = self._ensure_cursor()
        log_statement(logger, "Executing static command", sql)
        with wrap_driver_errors():
            cursor.execute(sql)
        return cursor

    def query(self, sql: str) -> Query:
        return Query(lambda: self._execute(sql), self.options.max_rows)

    def update(self, sql: str) -> Update:
        return Update(lambda: self._execute(sql))

    def execute(self, sql: str) -> Execute:
        return Execute(lambda: self._execute(sql), self.options.max_rows)

    def batch(self) -> "StaticBatch":
        self._check_open()
        return StaticBatch(self)


class StaticBatch(Batch):
    """A batch of complete SQL commands, run one after the other."""

    def __init__(self, statement: StaticStatement) -> None:
        self._statement = statement
        self._commands: list[str] = []

    def add(self, sql: str) -> "StaticBatch":
        if sql is None:
            msg = "sql is None"
            raise ValueError(msg)
        self._commands.append(sql)
        return self

    def __len__(self) -> int:
        return len(self._commands)

    def clear(self) -> None:
        self._commands = []

    def _run(self) -> "BatchResult[None]":
        counts = [self._statement._execute(sql).rowcount for sql in self._commands]
        return BatchResult(counts)

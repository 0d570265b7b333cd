"""Builders for update, execute and batch operations."""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional

from typing_extensions import TypeVar

from stmtspec.exceptions import wrap_driver_errors
from stmtspec.statement.result import BatchResult, ExecuteResult, UpdateResult
from stmtspec.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stmtspec.protocols import CursorProtocol

__all__ = ("Batch", "Execute", "Update")

logger = get_logger("statement")

T = TypeVar("T")


class Update:
    """Runs a command that changes rows and reports the update count.

    Args:
        runner: Executes the command and returns the cursor it ran on.
    """

    __slots__ = ("_runner",)

    def __init__(self, runner: "Callable[[], CursorProtocol]") -> None:
        self._runner = runner

    def run(self) -> "UpdateResult[None]":
        cursor = self._runner()
        return UpdateResult(cursor.rowcount)

    def run_get_key(self) -> "UpdateResult[Any]":
        """Run the command and return the driver's ``lastrowid`` as value."""
        cursor = self._runner()
        return UpdateResult(cursor.rowcount, getattr(cursor, "lastrowid", None))

    def count(self) -> int:
        """Run the command and return the update count."""
        return self.run().count


class Execute:
    """Runs any command and gives access to its results.

    Args:
        runner: Executes the command and returns the cursor it ran on.
        max_rows: Row limit for result sets read through the result.
        out_params: Returns the procedure output values after a run.
    """

    __slots__ = ("_max_rows", "_out_params", "_runner")

    def __init__(
        self,
        runner: "Callable[[], CursorProtocol]",
        max_rows: int = 0,
        out_params: "Optional[Callable[[], Sequence[Any]]]" = None,
    ) -> None:
        self._runner = runner
        self._max_rows = max_rows
        self._out_params = out_params

    def run(self) -> ExecuteResult:
        cursor = self._runner()
        out_params = self._out_params() if self._out_params is not None else None
        return ExecuteResult(cursor, out_params, self._max_rows)

    def run_with(self, reader: "Callable[[ExecuteResult], T]") -> T:
        """Run the command and pass the result to ``reader``.

        Exceptions raised by ``reader`` are translated into stmtspec exceptions.
        """
        result = self.run()
        with wrap_driver_errors():
            return reader(result)


class Batch(ABC):
    """Collects commands and runs them together."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of commands in the batch."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all commands from the batch."""

    @abstractmethod
    def _run(self) -> "BatchResult[None]":
        """Run the commands."""

    def run(self) -> "BatchResult[None]":
        """Run the commands and clear the batch.

        The batch is cleared even if running failed.
        """
        size = len(self)
        try:
            result = self._run()
        finally:
            self.clear()
        log_with_context(logger, logging.DEBUG, "Batch executed", batch_size=size, total_count=result.total_count)
        return result

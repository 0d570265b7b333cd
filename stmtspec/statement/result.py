"""Results of update, batch and execute operations."""

from enum import Enum
from typing import TYPE_CHECKING, Any, Final, Generic, Optional

from typing_extensions import TypeVar

from stmtspec.exceptions import IllegalStateError, InvalidResultError, wrap_driver_errors
from stmtspec.statement.query import QueryCursor
from stmtspec.utils.type_guards import has_nextset

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stmtspec.protocols import CursorProtocol

__all__ = ("EXECUTE_FAILED", "SUCCESS_NO_INFO", "BatchCountType", "BatchResult", "ExecuteResult", "UpdateResult")

T = TypeVar("T")

SUCCESS_NO_INFO: Final = -2
EXECUTE_FAILED: Final = -3


class UpdateResult(Generic[T]):
    """The row count of an update, optionally with a value such as a generated key."""

    __slots__ = ("count", "value")

    def __init__(self, count: int = 0, value: "Optional[T]" = None) -> None:
        self.count = count
        self.value = value

    def require_count(self, minimum: int, maximum: "Optional[int]" = None) -> "UpdateResult[T]":
        """Check the update count.

        Args:
            minimum: Expected count, or the lower bound if ``maximum`` is given.
            maximum: Upper bound, inclusive.

        Raises:
            InvalidResultError: If the count is outside the range.
        """
        maximum = minimum if maximum is None else maximum
        if not minimum <= self.count <= maximum:
            expected = str(minimum) if minimum == maximum else f"{minimum}..{maximum}"
            msg = f"expected update count {expected}, but was {self.count}"
            raise InvalidResultError(msg)
        return self

    def require_value(self) -> T:
        if self.value is None:
            msg = "update result has no value"
            raise InvalidResultError(msg)
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UpdateResult):
            return False
        return self.count == other.count and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.count, self.value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(count={self.count!r}, value={self.value!r})"


class BatchCountType(Enum):
    """How to interpret one entry of a batch result."""

    COUNT = "count"
    SUCCESS_NO_INFO = "success_no_info"
    EXECUTE_FAILED = "execute_failed"

    @classmethod
    def of(cls, count: int) -> "BatchCountType":
        if count == SUCCESS_NO_INFO:
            return cls.SUCCESS_NO_INFO
        if count == EXECUTE_FAILED:
            return cls.EXECUTE_FAILED
        return cls.COUNT


class BatchResult(Generic[T]):
    """Update counts of the commands in a batch.

    Drivers that execute a batch in one call (``executemany``) report only a
    total, so every entry is :data:`SUCCESS_NO_INFO` and :attr:`total_count`
    holds the driver's row count.

    Args:
        counts: One entry per command, a row count or one of the marker values.
        total_count: Overall row count; the sum of the real counts if omitted.
    """

    __slots__ = ("_total_count", "counts", "value")

    def __init__(
        self, counts: "Sequence[int]", total_count: "Optional[int]" = None, value: "Optional[T]" = None
    ) -> None:
        self.counts = tuple(counts)
        self._total_count = total_count
        self.value = value

    @property
    def total_count(self) -> int:
        if self._total_count is not None:
            return self._total_count
        return sum(count for count in self.counts if count >= 0)

    def __len__(self) -> int:
        return len(self.counts)

    def count(self, index: int) -> int:
        """The count of the command at 0-based ``index``."""
        return self.counts[index]

    def count_type(self, index: int) -> BatchCountType:
        return BatchCountType.of(self.counts[index])

    def require_count(self, index: int, count: int) -> "BatchResult[T]":
        if self.counts[index] != count:
            msg = f"batch command {index}: expected update count {count}, but was {self.counts[index]}"
            raise InvalidResultError(msg)
        return self

    def require_count_type(self, index: int, count_type: BatchCountType) -> "BatchResult[T]":
        actual = self.count_type(index)
        if actual is not count_type:
            msg = f"batch command {index}: expected {count_type.value}, but was {actual.value}"
            raise InvalidResultError(msg)
        return self

    def require_value(self) -> T:
        if self.value is None:
            msg = "batch result has no value"
            raise InvalidResultError(msg)
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(counts={self.counts!r}, total_count={self.total_count!r})"


class ExecuteResult:
    """Result of executing an arbitrary command.

    The current result is either a result set (:attr:`is_query_result`) or an
    update count. Drivers supporting ``nextset`` can step through further
    results with :meth:`next`.

    Args:
        cursor: The cursor on which the command was executed.
        out_params: Parameter values returned by a procedure call.
        max_rows: Row limit for :meth:`query_result` cursors.
    """

    __slots__ = ("_cursor", "_max_rows", "out_params")

    def __init__(
        self, cursor: "CursorProtocol", out_params: "Optional[Sequence[Any]]" = None, max_rows: int = 0
    ) -> None:
        self._cursor = cursor
        self._max_rows = max_rows
        self.out_params: tuple[Any, ...] = tuple(out_params) if out_params is not None else ()

    @property
    def is_query_result(self) -> bool:
        return self._cursor.description is not None

    @property
    def is_update_result(self) -> bool:
        return not self.is_query_result

    @property
    def update_count(self) -> int:
        """Rows affected by the current result, ``-1`` for a result set or if unknown."""
        if self.is_query_result:
            return -1
        return self._cursor.rowcount

    @property
    def last_row_id(self) -> Any:
        return getattr(self._cursor, "lastrowid", None)

    def query_result(self) -> QueryCursor:
        """Cursor over the current result set.

        Raises:
            IllegalStateError: If the current result is an update count.
        """
        if not self.is_query_result:
            msg = "current result is not a result set"
            raise IllegalStateError(msg)
        return QueryCursor(self._cursor, self._max_rows)

    def next(self) -> bool:
        """Move to the next result.

        Returns:
            False if there are no more results or the driver has no ``nextset``.
        """
        if not has_nextset(self._cursor):
            return False
        with wrap_driver_errors():
            return bool(self._cursor.nextset())

    def __repr__(self) -> str:
        kind = "query" if self.is_query_result else "update"
        return f"{type(self).__name__}({kind})"

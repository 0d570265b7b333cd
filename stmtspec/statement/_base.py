"""Common base classes of the statement wrappers."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Final, Optional, Union

from stmtspec.exceptions import (
    IllegalStateError,
    MissingParameterError,
    StatementClosedError,
    combine_errors,
    wrap_driver_errors,
)
from stmtspec.options import StatementOptions
from stmtspec.utils.logging import get_logger
from stmtspec.utils.type_guards import is_connection

if TYPE_CHECKING:
    from types import TracebackType

    from typing_extensions import Self, TypeAlias

    from stmtspec.config import StatementConfig
    from stmtspec.protocols import ConnectionProtocol, CursorProtocol

__all__ = ("ConnectionSource", "ParameterizedStatement", "Statement", "resolve_connection")

logger = get_logger("statement")

ConnectionSource: "TypeAlias" = Union["ConnectionProtocol", Callable[[], "ConnectionProtocol"]]

_UNSET: Final = object()


def resolve_connection(
    source: "ConnectionSource", close_connection: "Optional[bool]"
) -> "tuple[ConnectionProtocol, bool]":
    """Turn a connection or connection factory into a connection.

    A factory is called immediately. Unless ``close_connection`` says
    otherwise, connections obtained from a factory are owned (closed together
    with the statement) and connections passed in directly are not.

    Raises:
        ValueError: If ``source`` is ``None``.
        TypeError: If ``source`` is neither a connection nor callable.
    """
    if source is None:
        msg = "connection is None"
        raise ValueError(msg)
    if is_connection(source):
        return source, bool(close_connection)
    if callable(source):
        with wrap_driver_errors():
            connection = source()
        return connection, True if close_connection is None else close_connection
    msg = f"expected a DB-API connection or a connection factory, got {type(source).__name__}"
    raise TypeError(msg)


class Statement(ABC):
    """Common base class of static, prepared and callable statements.

    A statement wraps one DB-API cursor on a connection. It is a context
    manager; leaving the block closes the cursor, and the connection too when
    the statement owns it.

    Args:
        connection: A DB-API connection, or a zero-argument callable returning one.
        close_connection: Whether :meth:`close` also closes the connection.
            Defaults to ``False`` for a connection and ``True`` for a factory.
        config: Supplies option defaults; the global configuration if omitted.
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
        self._cursor: Optional[CursorProtocol] = None
        self._options: Optional[StatementOptions] = None

    # -- open/closed state --

    @property
    def is_closed(self) -> bool:
        return self._connection is None

    @property
    @abstractmethod
    def is_initialized(self) -> bool:
        """Whether the statement can be executed."""

    @property
    def connection(self) -> "ConnectionProtocol":
        """The connection used by the statement.

        Raises:
            StatementClosedError: If the statement is closed.
        """
        self._check_open()
        return self._connection  # type: ignore[return-value]

    @property
    def cursor(self) -> "CursorProtocol":
        """The native DB-API cursor.

        Raises:
            IllegalStateError: If the statement has not been initialized.
        """
        self._check_initialized()
        return self._cursor  # type: ignore[return-value]

    @property
    def closes_connection(self) -> bool:
        return self._close_connection

    def _check_open(self) -> None:
        if self.is_closed:
            raise StatementClosedError

    def _check_initialized(self) -> None:
        self._check_open()
        if self._cursor is None:
            msg = "statement is not initialized"
            raise IllegalStateError(msg)

    # -- options --

    @property
    def options(self) -> StatementOptions:
        """The statement options, created on first access."""
        if self._options is None:
            self._options = StatementOptions(self._config, on_change=self._apply_options)
        return self._options

    def _apply_options(self, options: StatementOptions) -> None:
        if self._cursor is not None:
            with wrap_driver_errors():
                options.apply(self._cursor)

    # -- cursor lifecycle --

    def _open_cursor(self) -> "CursorProtocol":
        """Replace the current cursor by a fresh one."""
        connection = self.connection
        self._close_cursor()
        with wrap_driver_errors():
            cursor = connection.cursor()
            self.options.apply(cursor)
        self._cursor = cursor
        return cursor

    def _close_cursor(self) -> None:
        cursor, self._cursor = self._cursor, None
        if cursor is not None:
            with wrap_driver_errors():
                cursor.close()

    def close(self) -> None:
        """Close the statement. Has no effect if it is already closed.

        Raises:
            StmtSpecError: If closing the cursor or the connection failed. When
                both fail the second failure is listed in ``suppressed``.
        """
        if self.is_closed:
            return
        cursor, connection = self._cursor, self._connection
        self._cursor = None
        self._connection = None
        errors: list[BaseException] = []
        if cursor is not None:
            try:
                cursor.close()
            except Exception as e:
                errors.append(e)
        if self._close_connection and connection is not None:
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

    def __repr__(self) -> str:
        if self.is_closed:
            return f"<{type(self).__name__} closed>"
        return f"<{type(self).__name__} initialized={self.is_initialized}>"


class ParameterizedStatement(Statement):
    """A statement holding positional parameter values (1-based)."""

    def __init__(
        self,
        connection: "ConnectionSource",
        *,
        close_connection: "Optional[bool]" = None,
        config: "Optional[StatementConfig]" = None,
    ) -> None:
        super().__init__(connection, close_connection=close_connection, config=config)
        self._values: list[Any] = []

    @property
    def is_initialized(self) -> bool:
        return not self.is_closed and self._cursor is not None

    def params(self, *values: Any) -> "Self":
        """Set the parameters at positions ``1..len(values)``."""
        self._check_initialized()
        for index, value in enumerate(values, start=1):
            self._set_value(index, value)
        return self

    def clear_params(self) -> "Self":
        self._check_initialized()
        self._values = []
        return self

    def _set_value(self, index: int, value: Any) -> None:
        if index < 1:
            msg = f"parameter index must be >= 1, is {index}"
            raise ValueError(msg)
        if index > len(self._values):
            self._values.extend([_UNSET] * (index - len(self._values)))
        self._values[index - 1] = value

    def _bound_values(self, required: int = 0) -> "tuple[Any, ...]":
        """Return the parameter values in position order.

        Raises:
            MissingParameterError: If a position up to the highest set one, or
                up to ``required``, has no value.
        """
        values = self._values
        if len(values) < required:
            values = values + [_UNSET] * (required - len(values))
        missing = [str(index) for index, value in enumerate(values, start=1) if value is _UNSET]
        if missing:
            msg = f"parameter(s) not set: {', '.join(missing)}"
            raise MissingParameterError(msg, self._describe())
        return tuple(values)

    def _describe(self) -> "Optional[str]":
        """The command text used in error messages."""
        return None

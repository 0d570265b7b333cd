from collections.abc import Generator
from contextlib import contextmanager
from enum import Enum, auto
from typing import Any, Optional

__all__ = (
    "DriverError",
    "DriverErrorType",
    "ErrorReason",
    "IllegalStateError",
    "InvalidResultError",
    "MissingParameterError",
    "ParameterError",
    "ProcessingError",
    "SQLBuilderError",
    "StatementClosedError",
    "StmtSpecError",
    "UnknownParameterError",
    "combine_errors",
    "translate_error",
    "wrap_driver_errors",
)


class ErrorReason(Enum):
    """Why a :class:`StmtSpecError` was raised."""

    DRIVER = auto()
    """A DB-API driver call failed."""
    PROCESS = auto()
    """Processing a result raised an exception."""
    INVALID_RESULT = auto()
    """A result did not meet the caller's expectations."""
    CLOSED = auto()
    """An operation was performed on a closed statement or result."""
    ILLEGAL_STATE = auto()
    """An operation was invoked in a state that does not allow it."""

    def __str__(self) -> str:
        return self.name.lower()


class StmtSpecError(Exception):
    """Base exception class from which all stmtspec exceptions inherit."""

    detail: str
    reason: ErrorReason = ErrorReason.ILLEGAL_STATE

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``StmtSpecError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        self.suppressed: list[BaseException] = []
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class DriverErrorType(Enum):
    """Categorizes DB-API exceptions, most specific first."""

    INTEGRITY = "IntegrityError"
    DATA = "DataError"
    OPERATIONAL = "OperationalError"
    PROGRAMMING = "ProgrammingError"
    NOT_SUPPORTED = "NotSupportedError"
    INTERNAL = "InternalError"
    INTERFACE = "InterfaceError"
    DATABASE = "DatabaseError"
    BASIC = "Error"

    @classmethod
    def from_exception(cls, error: BaseException) -> "Optional[DriverErrorType]":
        """Classify a driver exception by the PEP 249 class names in its MRO.

        Drivers define their own exception classes, so the lookup is by name
        rather than by identity.

        Returns:
            The matching type, or ``None`` if ``error`` is not a DB-API exception.
        """
        mro_names = {klass.__name__ for klass in type(error).__mro__}
        if "Error" not in mro_names or isinstance(error, StmtSpecError):
            return None
        for member in cls:
            if member.value in mro_names:
                return member
        return None

    @property
    def is_transient(self) -> bool:
        """Operational failures (lost connections, locks, timeouts) may succeed on retry."""
        return self is DriverErrorType.OPERATIONAL


class DriverError(StmtSpecError):
    """Wraps an exception raised by the DB-API driver."""

    reason = ErrorReason.DRIVER

    def __init__(self, error: BaseException, message: Optional[str] = None) -> None:
        self.error_type = DriverErrorType.from_exception(error) or DriverErrorType.BASIC
        super().__init__(message or f"{self.error_type.value}: {error}")

    @property
    def is_transient(self) -> bool:
        return self.error_type.is_transient


class ProcessingError(StmtSpecError):
    """Wraps an exception raised while processing a result."""

    reason = ErrorReason.PROCESS


class InvalidResultError(StmtSpecError):
    """A result did not match what was required."""

    reason = ErrorReason.INVALID_RESULT


class StatementClosedError(StmtSpecError):
    """Raised when using a statement that has been closed."""

    reason = ErrorReason.CLOSED

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or "statement already closed")


class IllegalStateError(StmtSpecError):
    """Raised when an operation is not allowed in the current state."""

    reason = ErrorReason.ILLEGAL_STATE


# -- Parameter Errors --
class ParameterError(StmtSpecError, ValueError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class UnknownParameterError(ParameterError):
    """Raised when binding a name that does not occur in the command."""

    def __init__(self, name: str, sql: Optional[str] = None) -> None:
        super().__init__(f"sql command does not contain parameter {name!r}", sql)
        self.name = name


class MissingParameterError(ParameterError):
    """Raised when a positional parameter has not been set before execution."""


class SQLBuilderError(StmtSpecError):
    """Issues building or generating SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


def translate_error(error: BaseException) -> StmtSpecError:
    """Return ``error`` itself if it is a :class:`StmtSpecError`, else a wrapper for it."""
    if isinstance(error, StmtSpecError):
        return error
    if DriverErrorType.from_exception(error) is not None:
        return DriverError(error)
    return ProcessingError(f"{type(error).__name__}: {error}")


def combine_errors(*errors: Optional[BaseException]) -> Optional[StmtSpecError]:
    """Fold several failures into one exception.

    The first non-``None`` error is translated and returned, the rest are
    appended to its ``suppressed`` list.
    """
    combined: Optional[StmtSpecError] = None
    for error in errors:
        if error is None:
            continue
        if combined is None:
            combined = translate_error(error)
            if combined is not error:
                combined.__cause__ = error
        else:
            combined.suppressed.append(error)
    return combined


@contextmanager
def wrap_driver_errors(wrap_exceptions: bool = True) -> Generator[None, None, None]:
    try:
        yield

    except StmtSpecError:
        raise
    except Exception as exc:
        if wrap_exceptions is False:
            raise
        raise translate_error(exc) from exc

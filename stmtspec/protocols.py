"""Runtime-checkable protocols for the DB-API objects stmtspec wraps.

Only the PEP 249 surface that stmtspec actually calls is described here;
optional driver extensions (``callproc``, ``nextset``) get their own
protocols so they can be detected with ``isinstance``.
"""

from collections.abc import Sequence
from typing import Any, Optional, Protocol, runtime_checkable

__all__ = (
    "CallprocCursorProtocol",
    "ConnectionProtocol",
    "CursorProtocol",
    "NextsetCursorProtocol",
)


@runtime_checkable
class CursorProtocol(Protocol):
    """Protocol for a DB-API 2.0 cursor."""

    arraysize: int

    @property
    def description(self) -> Optional[Sequence[Sequence[Any]]]:
        """Column descriptions of the last query, ``None`` for non-queries."""
        ...

    @property
    def rowcount(self) -> int:
        """Rows affected by the last operation, ``-1`` if unknown."""
        ...

    def execute(self, operation: str, parameters: Any = ...) -> Any:
        """Execute an operation."""
        ...

    def executemany(self, operation: str, seq_of_parameters: Any) -> Any:
        """Execute an operation once per parameter set."""
        ...

    def fetchone(self) -> Any:
        """Fetch the next row."""
        ...

    def fetchmany(self, size: int = ...) -> Any:
        """Fetch the next set of rows."""
        ...

    def fetchall(self) -> Any:
        """Fetch all remaining rows."""
        ...

    def close(self) -> Any:
        """Close the cursor."""
        ...


@runtime_checkable
class CallprocCursorProtocol(Protocol):
    """Cursor supporting the optional ``callproc`` extension."""

    def callproc(self, procname: str, parameters: Any = ...) -> Any:
        """Call a stored procedure."""
        ...


@runtime_checkable
class NextsetCursorProtocol(Protocol):
    """Cursor supporting the optional ``nextset`` extension."""

    def nextset(self) -> Optional[bool]:
        """Skip to the next available result set."""
        ...


@runtime_checkable
class ConnectionProtocol(Protocol):
    """Protocol for a DB-API 2.0 connection."""

    def cursor(self) -> Any:
        """Return a new cursor."""
        ...

    def commit(self) -> Any:
        """Commit the current transaction."""
        ...

    def rollback(self) -> Any:
        """Roll back the current transaction."""
        ...

    def close(self) -> Any:
        """Close the connection."""
        ...

"""Type guard functions for runtime type checking in stmtspec.

This module provides type-safe runtime checks that help the type checker
understand type narrowing, replacing defensive hasattr() and duck typing patterns.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from stmtspec.protocols import CallprocCursorProtocol, ConnectionProtocol, NextsetCursorProtocol

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

__all__ = (
    "has_callproc",
    "has_nextset",
    "is_connection",
    "is_mapping_parameters",
)


def is_connection(obj: Any) -> "TypeGuard[ConnectionProtocol]":
    """Check if an object looks like a DB-API connection.

    Args:
        obj: The object to check

    Returns:
        True if the object has ``cursor``, ``commit``, ``rollback`` and ``close``
    """
    return isinstance(obj, ConnectionProtocol)


def has_callproc(cursor: Any) -> "TypeGuard[CallprocCursorProtocol]":
    """Check if a cursor implements the optional ``callproc`` extension."""
    return isinstance(cursor, CallprocCursorProtocol)


def has_nextset(cursor: Any) -> "TypeGuard[NextsetCursorProtocol]":
    """Check if a cursor implements the optional ``nextset`` extension."""
    return isinstance(cursor, NextsetCursorProtocol)


def is_mapping_parameters(params: Any) -> "TypeGuard[Mapping[str, Any]]":
    return isinstance(params, Mapping)

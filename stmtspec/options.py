"""Per-statement options."""

from typing import TYPE_CHECKING, Any, Callable, Optional

from stmtspec.config import get_global_config

if TYPE_CHECKING:
    from stmtspec.config import StatementConfig

__all__ = ("StatementOptions",)


class StatementOptions:
    """Mutable options of a single statement.

    Initial values come from the global :class:`~stmtspec.config.StatementConfig`.
    Setters return ``self`` so calls can be chained::

        stmt.options.set_fetch_size(500).set_max_rows(10)

    Args:
        config: Configuration supplying the defaults, the global one if omitted.
        on_change: Called with the options after every change; statements use it
            to push ``fetch_size`` onto a live cursor.
    """

    __slots__ = ("_fetch_size", "_max_rows", "_on_change")

    def __init__(
        self,
        config: "Optional[StatementConfig]" = None,
        on_change: "Optional[Callable[[StatementOptions], Any]]" = None,
    ) -> None:
        config = config or get_global_config()
        self._fetch_size = config.fetch_size
        self._max_rows = config.max_rows
        self._on_change = on_change

    @property
    def fetch_size(self) -> int:
        """Rows fetched per round trip (the cursor ``arraysize``)."""
        return self._fetch_size

    @fetch_size.setter
    def fetch_size(self, value: int) -> None:
        self.set_fetch_size(value)

    @property
    def max_rows(self) -> int:
        """Maximum number of rows a query reads, ``0`` for no limit."""
        return self._max_rows

    @max_rows.setter
    def max_rows(self, value: int) -> None:
        self.set_max_rows(value)

    def set_fetch_size(self, value: int) -> "StatementOptions":
        if value <= 0:
            msg = f"fetch_size must be positive, is {value}"
            raise ValueError(msg)
        self._fetch_size = value
        self._changed()
        return self

    def set_max_rows(self, value: int) -> "StatementOptions":
        if value < 0:
            msg = f"max_rows must not be negative, is {value}"
            raise ValueError(msg)
        self._max_rows = value
        self._changed()
        return self

    def apply(self, cursor: Any) -> None:
        """Apply the options to a DB-API cursor."""
        cursor.arraysize = self._fetch_size

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fetch_size={self._fetch_size!r}, max_rows={self._max_rows!r})"

"""Statements running one parameterized command, optionally with named parameters."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional, Union, overload

from stmtspec.config import get_global_config
from stmtspec.exceptions import IllegalStateError, UnknownParameterError, wrap_driver_errors
from stmtspec.parameters import NamedParameterPlan, parse_named_parameters
from stmtspec.statement._base import ParameterizedStatement, logger
from stmtspec.statement.query import Query
from stmtspec.statement.result import SUCCESS_NO_INFO, BatchResult
from stmtspec.statement.runnable import Batch, Execute, Update
from stmtspec.utils.logging import log_statement
from stmtspec.utils.type_guards import is_mapping_parameters

if TYPE_CHECKING:
    from typing_extensions import Self

    from stmtspec.config import StatementConfig
    from stmtspec.protocols import CursorProtocol
    from stmtspec.statement._base import ConnectionSource

__all__ = ("IndexedParam", "NamedParam", "PreparedBatch", "PreparedStatement")


class PreparedStatement(ParameterizedStatement):
    """Runs a parameterized SQL command, repeatedly with different values.

    The command uses ``?`` placeholders, or ``:name`` placeholders when
    initialized with ``named=True``. Named commands are converted once, at
    :meth:`init`, and each named value is written to every position the name
    occupies::

        stmt = PreparedStatement(connection)
        stmt.init("SELECT * FROM city WHERE name = :name OR alias = :name", named=True)
        stmt.param("name").set("Rome")
        rows = stmt.query().rows().map()

    Named and positional binding can be mixed: ``param(1)`` addresses the
    first ``?`` produced for a named parameter.
    """

    def __init__(
        self,
        connection: "ConnectionSource",
        *,
        close_connection: "Optional[bool]" = None,
        config: "Optional[StatementConfig]" = None,
    ) -> None:
        super().__init__(connection, close_connection=close_connection, config=config)
        self._sql: Optional[str] = None
        self._plan: Optional[NamedParameterPlan] = None

    # -- init --

    def init(self, sql: "Union[str, NamedParameterPlan]", *, named: "Optional[bool]" = None) -> "Self":
        """Initialize the statement with a command, replacing any previous one.

        Args:
            sql: The command text, or a plan returned by
                :func:`~stmtspec.parameters.parse_named_parameters`.
            named: Whether ``sql`` uses ``:name`` placeholders. Defaults to the
                configured ``named_parameters``. Ignored for a plan.

        Returns:
            The statement.
        """
        if sql is None:
            msg = "sql is None"
            raise ValueError(msg)
        self._check_open()
        if isinstance(sql, NamedParameterPlan):
            plan: Optional[NamedParameterPlan] = sql
        else:
            if named is None:
                named = (self._config or get_global_config()).named_parameters
            plan = parse_named_parameters(sql) if named else None

        self._sql = None
        self._plan = None
        self._values = []
        self._open_cursor()
        self._plan = plan
        self._sql = plan.converted if plan is not None else sql
        log_statement(logger, "Prepared statement initialized", self._sql, named=plan is not None)
        return self

    @property
    def is_initialized(self) -> bool:
        return super().is_initialized and self._sql is not None

    def _check_initialized(self) -> None:
        super()._check_initialized()
        if self._sql is None:
            msg = "statement is not initialized"
            raise IllegalStateError(msg)

    @property
    def sql(self) -> str:
        """The command sent to the driver (the converted one for named commands)."""
        self._check_initialized()
        return self._sql  # type: ignore[return-value]

    @property
    def plan(self) -> "Optional[NamedParameterPlan]":
        """The named-parameter plan, ``None`` for positional commands."""
        return self._plan

    @property
    def is_named(self) -> bool:
        return self._plan is not None

    # -- params --

    @overload
    def param(self, key: int) -> "IndexedParam": ...

    @overload
    def param(self, key: str) -> "NamedParam": ...

    def param(self, key: "Union[int, str]") -> "Union[IndexedParam, NamedParam]":
        """Return a parameter object for a 1-based index or a parameter name.

        Raises:
            IllegalStateError: If a name is given but the command is not named.
            UnknownParameterError: If the name does not occur in the command.
        """
        self._check_initialized()
        if isinstance(key, int):
            return IndexedParam(self, key)
        if self._plan is None:
            msg = "statement is not named: use init(sql, named=True) to create a named statement"
            raise IllegalStateError(msg)
        positions = self._plan.get_positions(key)
        if positions is None:
            raise UnknownParameterError(key, self._plan.source)
        return NamedParam(self, key, positions)

    def set_params(self, values: "Mapping[str, Any]") -> "Self":
        """Set named parameters from a mapping."""
        if not is_mapping_parameters(values):
            msg = f"expected a mapping of parameter names to values, got {type(values).__name__}"
            raise TypeError(msg)
        for name, value in values.items():
            self.param(name).set(value)
        return self

    def _required_count(self) -> int:
        return self._plan.parameter_count if self._plan is not None else 0

    def _describe(self) -> "Optional[str]":
        return self._plan.source if self._plan is not None else self._sql

    # -- run --

    def _execute(self) -> "CursorProtocol":
        cursor = self.cursor
        values = self._bound_values(required=self._required_count())
        log_statement(logger, "Executing prepared command", self._sql, parameter_count=len(values))
        with wrap_driver_errors():
            cursor.execute(self._sql, values)
        return cursor

    def query(self) -> Query:
        self._check_initialized()
        return Query(self._execute, self.options.max_rows)

    def update(self) -> Update:
        self._check_initialized()
        return Update(self._execute)

    def execute(self) -> Execute:
        self._check_initialized()
        return Execute(self._execute, self.options.max_rows)

    def batch(self) -> "PreparedBatch":
        self._check_initialized()
        return PreparedBatch(self)

    def __repr__(self) -> str:
        if self.is_closed or self._sql is None:
            return super().__repr__()
        return f"<{type(self).__name__} sql={self._sql!r}>"


class IndexedParam:
    """A parameter addressed by its 1-based position."""

    __slots__ = ("_index", "_statement")

    def __init__(self, statement: ParameterizedStatement, index: int) -> None:
        if index < 1:
            msg = f"parameter index must be >= 1, is {index}"
            raise ValueError(msg)
        self._statement = statement
        self._index = index

    @property
    def index(self) -> int:
        return self._index

    def set(self, value: Any) -> None:
        self._statement._set_value(self._index, value)


class NamedParam:
    """A named parameter, bound to every position the name occupies."""

    __slots__ = ("_name", "_positions", "_statement")

    def __init__(self, statement: ParameterizedStatement, name: str, positions: "tuple[int, ...]") -> None:
        self._statement = statement
        self._name = name
        self._positions = positions

    @property
    def name(self) -> str:
        return self._name

    @property
    def positions(self) -> "tuple[int, ...]":
        return self._positions

    def set(self, value: Any) -> None:
        for position in self._positions:
            self._statement._set_value(position, value)


class PreparedBatch(Batch):
    """Collects parameter sets for the command of a :class:`PreparedStatement`.

    Each :meth:`add` records the statement's current parameter values; the
    values stay set, so only the changing ones need to be set between adds.
    """

    def __init__(self, statement: PreparedStatement) -> None:
        self._statement = statement
        self._rows: list[tuple[Any, ...]] = []

    def add(self, values: "Optional[Mapping[str, Any]]" = None) -> "PreparedBatch":
        """Add the current parameter values, after applying ``values`` if given."""
        if values is not None:
            self._statement.set_params(values)
        statement = self._statement
        self._rows.append(statement._bound_values(required=statement._required_count()))
        return self

    def __len__(self) -> int:
        return len(self._rows)

    def clear(self) -> None:
        self._rows = []

    def _run(self) -> "BatchResult[None]":
        cursor = self._statement.cursor
        log_statement(logger, "Executing prepared batch", self._statement.sql, batch_size=len(self._rows))
        with wrap_driver_errors():
            cursor.executemany(self._statement.sql, self._rows)
        return BatchResult([SUCCESS_NO_INFO] * len(self._rows), cursor.rowcount)

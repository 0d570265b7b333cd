"""Base class of the SQL command builders.

Builders render commands through sqlglot. Values are never inlined: each one
becomes a ``:name`` placeholder and is collected in the built query's
``parameters``, ready for a named :class:`~stmtspec.statement.PreparedStatement`.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlglot import exp
from sqlglot.dialects.dialect import DialectType

from stmtspec.exceptions import SQLBuilderError
from stmtspec.parameters import PARAMETER_MARKER, is_identifier_part, is_identifier_start, parse_named_parameters
from stmtspec.utils.logging import get_logger, log_statement

if TYPE_CHECKING:
    from stmtspec.parameters import NamedParameterPlan

__all__ = ("BuiltQuery", "ConditionalBuilder", "QueryBuilder")

logger = get_logger("builder")


@dataclass(frozen=True)
class BuiltQuery:
    """A rendered command with its named parameter values."""

    sql: str
    parameters: "dict[str, Any]" = field(default_factory=dict)
    dialect: Optional[DialectType] = None

    def to_plan(self) -> "NamedParameterPlan":
        """Scan the command into its positional form."""
        return parse_named_parameters(self.sql)


@dataclass
class QueryBuilder:
    """Base class for SQL command builders."""

    dialect: Optional[DialectType] = None
    _parameters: "dict[str, Any]" = field(default_factory=dict, init=False)
    _parameter_counter: int = field(default=0, init=False)

    def _build_expression(self) -> exp.Expression:
        """Create the sqlglot expression for the current builder state."""
        msg = "Subclasses must implement _build_expression"
        raise NotImplementedError(msg)

    def _add_parameter(self, value: Any, name: Optional[str] = None) -> exp.Placeholder:
        """Register a value and return the placeholder referring to it.

        Without ``name`` a name is derived from ``param``. An explicit name may
        be reused for the same value only.

        Raises:
            SQLBuilderError: If ``name`` is not a valid parameter name or is
                already bound to a different value.
        """
        if name is None:
            name = f"param_{self._parameter_counter}"
            self._parameter_counter += 1
        elif name in self._parameters and self._parameters[name] != value:
            msg = f"parameter {name!r} is already bound to a different value"
            raise SQLBuilderError(msg)
        if not _is_parameter_name(name):
            msg = f"invalid parameter name {name!r}"
            raise SQLBuilderError(msg)
        self._parameters[name] = value
        return exp.Placeholder(this=name)

    def _unique_parameter_name(self, base: str) -> str:
        """``base``, or ``base_1``, ``base_2``... if it is taken."""
        base = base.split(".")[-1]
        if base not in self._parameters:
            return base
        suffix = 1
        while f"{base}_{suffix}" in self._parameters:
            suffix += 1
        return f"{base}_{suffix}"

    def add_parameter(self, value: Any, name: Optional[str] = None) -> str:
        """Public method to add a parameter and return the placeholder name.

        Args:
            value: The parameter value to add.
            name: Optional name for the parameter. If not provided, a unique name will be generated.

        Returns:
            str: The name of the parameter placeholder.
        """
        return str(self._add_parameter(value, name).name)

    @property
    def parameters(self) -> "dict[str, Any]":
        return dict(self._parameters)

    def build(self) -> BuiltQuery:
        """Render the command.

        Raises:
            SQLBuilderError: If the builder is incomplete or sqlglot fails to render it.
        """
        expression = self._build_expression().transform(_colon_placeholder)
        try:
            sql = expression.sql(dialect=self.dialect)
        except Exception as e:
            msg = f"Failed to render SQL: {e}"
            raise SQLBuilderError(msg) from e
        log_statement(logger, "Built SQL", sql, parameter_count=len(self._parameters), dialect=self.dialect)
        return BuiltQuery(sql=sql, parameters=dict(self._parameters), dialect=self.dialect)

    def to_plan(self) -> "NamedParameterPlan":
        return self.build().to_plan()

    def __str__(self) -> str:
        return self.build().sql


@dataclass
class ConditionalBuilder(QueryBuilder):
    """Builder with a WHERE clause made of AND-ed conditions."""

    _conditions: "list[exp.Expression]" = field(default_factory=list, init=False)

    def where(self, condition: Union[str, exp.Expression]) -> "Any":
        """Add a condition, given as SQL text or a sqlglot expression.

        Conditions in text form may reference ``:name`` placeholders; their
        values are bound later, on the statement.
        """
        try:
            condition_expr = exp.condition(condition, dialect=self.dialect) if isinstance(condition, str) else condition
        except Exception as e:
            msg = f"Invalid condition {condition!r}: {e}"
            raise SQLBuilderError(msg) from e
        self._conditions.append(condition_expr)
        return self

    def where_eq(self, column: str, value: Any, name: Optional[str] = None) -> "Any":
        """Add ``column = :name`` and bind ``value`` to ``name`` (derived from ``column`` by default)."""
        placeholder = self._add_parameter(value, name or self._unique_parameter_name(column))
        self._conditions.append(exp.EQ(this=exp.to_column(column), expression=placeholder))
        return self

    def _where_expression(self) -> "Optional[exp.Expression]":
        if not self._conditions:
            return None
        return exp.and_(*self._conditions, copy=True)


def _colon_placeholder(node: exp.Expression) -> exp.Expression:
    """Pin named placeholders to ``:name``.

    Dialects render ``exp.Placeholder`` with their own token (``$name``,
    ``@name``, ``%(name)s``), which the named-parameter scanner does not read.
    """
    if isinstance(node, exp.Placeholder) and node.name:
        return exp.var(f"{PARAMETER_MARKER}{node.name}")
    return node


def _is_parameter_name(name: str) -> bool:
    return bool(name) and is_identifier_start(name[0]) and all(is_identifier_part(char) for char in name[1:])

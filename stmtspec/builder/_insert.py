from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from sqlglot import exp

from stmtspec.builder._base import QueryBuilder
from stmtspec.exceptions import SQLBuilderError

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ("InsertBuilder",)


@dataclass
class InsertBuilder(QueryBuilder):
    """Builds single-row INSERT commands.

    Each value becomes a placeholder named after its column, so the built
    command fits a prepared batch as well::

        built = insert("city").value("id", 1).value("name", "Rome").build()
        # INSERT INTO city (id, name) VALUES (:id, :name)
    """

    _table: Optional[str] = field(default=None, init=False)
    _columns: "list[str]" = field(default_factory=list, init=False)
    _placeholders: "list[exp.Expression]" = field(default_factory=list, init=False)

    def into(self, table: str) -> "InsertBuilder":
        self._table = table
        return self

    def value(self, column: str, value: Any, name: Optional[str] = None) -> "InsertBuilder":
        if column in self._columns:
            msg = f"column {column!r} is already set"
            raise SQLBuilderError(msg)
        self._placeholders.append(self._add_parameter(value, name or self._unique_parameter_name(column)))
        self._columns.append(column)
        return self

    def values(self, values: "Mapping[str, Any]") -> "InsertBuilder":
        for column, value in values.items():
            self.value(column, value)
        return self

    def _build_expression(self) -> exp.Expression:
        if self._table is None:
            msg = "INSERT needs a target table"
            raise SQLBuilderError(msg)
        if not self._columns:
            msg = "INSERT needs at least one value"
            raise SQLBuilderError(msg)
        row = exp.Tuple(expressions=[placeholder.copy() for placeholder in self._placeholders])
        return exp.insert(exp.Values(expressions=[row]), self._table, columns=self._columns, dialect=self.dialect)

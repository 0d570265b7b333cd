from dataclasses import dataclass, field
from typing import Any, Optional, Union

from sqlglot import exp

from stmtspec.builder._base import ConditionalBuilder
from stmtspec.exceptions import SQLBuilderError

__all__ = ("SelectBuilder",)


@dataclass
class SelectBuilder(ConditionalBuilder):
    """Builds SELECT queries::

        select("id", "name").from_("city").where_eq("name", "Rome").build().sql
        # SELECT id, name FROM city WHERE name = :name
    """

    _expression: exp.Select = field(default_factory=exp.Select, init=False)
    _has_from: bool = field(default=False, init=False)

    def select(self, *columns: Union[str, exp.Expression]) -> "SelectBuilder":
        self._expression = self._expression.select(*columns, dialect=self.dialect, copy=False)
        return self

    def from_(self, table: Union[str, exp.Expression]) -> "SelectBuilder":
        self._expression = self._expression.from_(table, dialect=self.dialect, copy=False)
        self._has_from = True
        return self

    def join(
        self, table: Union[str, exp.Expression], on: Union[str, exp.Expression], join_type: str = "INNER"
    ) -> "SelectBuilder":
        self._expression = self._expression.join(table, on=on, join_type=join_type, dialect=self.dialect, copy=False)
        return self

    def group_by(self, *columns: Union[str, exp.Expression]) -> "SelectBuilder":
        self._expression = self._expression.group_by(*columns, dialect=self.dialect, copy=False)
        return self

    def having(self, condition: Union[str, exp.Expression]) -> "SelectBuilder":
        self._expression = self._expression.having(condition, dialect=self.dialect, copy=False)
        return self

    def order_by(self, *columns: Union[str, exp.Expression]) -> "SelectBuilder":
        self._expression = self._expression.order_by(*columns, dialect=self.dialect, copy=False)
        return self

    def limit(self, count: int) -> "SelectBuilder":
        if count < 0:
            msg = f"limit must be >= 0, is {count}"
            raise SQLBuilderError(msg)
        self._expression = self._expression.limit(count, copy=False)
        return self

    def offset(self, count: int) -> "SelectBuilder":
        if count < 0:
            msg = f"offset must be >= 0, is {count}"
            raise SQLBuilderError(msg)
        self._expression = self._expression.offset(count, copy=False)
        return self

    def where_in(self, column: str, values: "list[Any]", name: Optional[str] = None) -> "SelectBuilder":
        """Add ``column IN (:name_0, :name_1, ...)``."""
        if not values:
            msg = f"where_in({column!r}) needs at least one value"
            raise SQLBuilderError(msg)
        base = name or column.split(".")[-1]
        placeholders = [
            self._add_parameter(value, self._unique_parameter_name(f"{base}_{index}"))
            for index, value in enumerate(values)
        ]
        self._conditions.append(exp.In(this=exp.to_column(column), expressions=placeholders))
        return self

    def _build_expression(self) -> exp.Expression:
        if not self._expression.expressions:
            msg = "SELECT needs at least one column"
            raise SQLBuilderError(msg)
        where = self._where_expression()
        if where is None:
            return self._expression.copy()
        return self._expression.where(where, copy=True)

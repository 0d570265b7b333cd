from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from sqlglot import exp

from stmtspec.builder._base import ConditionalBuilder
from stmtspec.exceptions import SQLBuilderError

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ("UpdateBuilder",)


@dataclass
class UpdateBuilder(ConditionalBuilder):
    """Builds UPDATE commands.

    A WHERE value for a column that is also assigned gets a suffixed
    placeholder name (``:name`` and ``:name_1``).
    """

    _table: Optional[str] = field(default=None, init=False)
    _assignments: "dict[str, exp.Expression]" = field(default_factory=dict, init=False)

    def table(self, table: str) -> "UpdateBuilder":
        self._table = table
        return self

    def set(self, column: str, value: Any, name: Optional[str] = None) -> "UpdateBuilder":
        if column in self._assignments:
            msg = f"column {column!r} is already set"
            raise SQLBuilderError(msg)
        self._assignments[column] = self._add_parameter(value, name or self._unique_parameter_name(column))
        return self

    def set_all(self, values: "Mapping[str, Any]") -> "UpdateBuilder":
        for column, value in values.items():
            self.set(column, value)
        return self

    def _build_expression(self) -> exp.Expression:
        if self._table is None:
            msg = "UPDATE needs a target table"
            raise SQLBuilderError(msg)
        if not self._assignments:
            msg = "UPDATE needs at least one assignment"
            raise SQLBuilderError(msg)
        properties = {column: placeholder.copy() for column, placeholder in self._assignments.items()}
        return exp.update(self._table, properties, where=self._where_expression(), dialect=self.dialect)

from dataclasses import dataclass, field
from typing import Optional

from sqlglot import exp

from stmtspec.builder._base import ConditionalBuilder
from stmtspec.exceptions import SQLBuilderError

__all__ = ("DeleteBuilder",)


@dataclass
class DeleteBuilder(ConditionalBuilder):
    """Builds DELETE commands. Without a condition every row is deleted."""

    _table: Optional[str] = field(default=None, init=False)

    def from_(self, table: str) -> "DeleteBuilder":
        self._table = table
        return self

    def _build_expression(self) -> exp.Expression:
        if self._table is None:
            msg = "DELETE needs a target table"
            raise SQLBuilderError(msg)
        return exp.delete(self._table, where=self._where_expression(), dialect=self.dialect)

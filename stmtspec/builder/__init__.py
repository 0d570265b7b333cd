"""Fluent builders rendering SQL with named placeholders.

The factory functions below are the entry points::

    from stmtspec.builder import select

    built = select("id", "name").from_("city").where_eq("name", "Rome").build()
    with PreparedStatement(connection) as stmt:
        rows = stmt.init(built.to_plan()).set_params(built.parameters).query().rows()
"""

from typing import TYPE_CHECKING, Optional, Union

from stmtspec.builder._base import BuiltQuery, ConditionalBuilder, QueryBuilder
from stmtspec.builder._delete import DeleteBuilder
from stmtspec.builder._insert import InsertBuilder
from stmtspec.builder._select import SelectBuilder
from stmtspec.builder._update import UpdateBuilder

if TYPE_CHECKING:
    from sqlglot import exp
    from sqlglot.dialects.dialect import DialectType

__all__ = (
    "BuiltQuery",
    "ConditionalBuilder",
    "DeleteBuilder",
    "InsertBuilder",
    "QueryBuilder",
    "SelectBuilder",
    "UpdateBuilder",
    "delete",
    "insert",
    "select",
    "update",
)


def select(*columns: "Union[str, exp.Expression]", dialect: "Optional[DialectType]" = None) -> SelectBuilder:
    builder = SelectBuilder(dialect=dialect)
    if columns:
        builder.select(*columns)
    return builder


def insert(table: "Optional[str]" = None, dialect: "Optional[DialectType]" = None) -> InsertBuilder:
    builder = InsertBuilder(dialect=dialect)
    if table is not None:
        builder.into(table)
    return builder


def update(table: "Optional[str]" = None, dialect: "Optional[DialectType]" = None) -> UpdateBuilder:
    builder = UpdateBuilder(dialect=dialect)
    if table is not None:
        builder.table(table)
    return builder


def delete(table: "Optional[str]" = None, dialect: "Optional[DialectType]" = None) -> DeleteBuilder:
    builder = DeleteBuilder(dialect=dialect)
    if table is not None:
        builder.from_(table)
    return builder

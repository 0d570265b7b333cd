from stmtspec.statement._base import ConnectionSource, ParameterizedStatement, Statement
from stmtspec.statement.callable import CallableStatement
from stmtspec.statement.group import StatementGroup
from stmtspec.statement.prepared import IndexedParam, NamedParam, PreparedBatch, PreparedStatement
from stmtspec.statement.query import Column, Query, QueryCursor, QueryOneRow, QueryRows
from stmtspec.statement.result import (
    EXECUTE_FAILED,
    SUCCESS_NO_INFO,
    BatchCountType,
    BatchResult,
    ExecuteResult,
    UpdateResult,
)
from stmtspec.statement.runnable import Batch, Execute, Update
from stmtspec.statement.static import StaticBatch, StaticStatement

__all__ = (
    "EXECUTE_FAILED",
    "SUCCESS_NO_INFO",
    "Batch",
    "BatchCountType",
    "BatchResult",
    "CallableStatement",
    "Column",
    "ConnectionSource",
    "Execute",
    "ExecuteResult",
    "IndexedParam",
    "NamedParam",
    "ParameterizedStatement",
    "PreparedBatch",
    "PreparedStatement",
    "Query",
    "QueryCursor",
    "QueryOneRow",
    "QueryRows",
    "Statement",
    "StatementGroup",
    "StaticBatch",
    "StaticStatement",
    "Update",
    "UpdateResult",
)

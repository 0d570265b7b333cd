"""stmtspec: a fluent wrapper around DB-API cursors with named parameters."""

from stmtspec import builder, config, exceptions, parameters, statement, utils
from stmtspec.__metadata__ import __version__
from stmtspec.config import StatementConfig, get_global_config, load_config_from_env, set_global_config
from stmtspec.exceptions import (
    DriverError,
    IllegalStateError,
    InvalidResultError,
    MissingParameterError,
    ParameterError,
    ProcessingError,
    SQLBuilderError,
    StatementClosedError,
    StmtSpecError,
    UnknownParameterError,
)
from stmtspec.options import StatementOptions
from stmtspec.parameters import NamedParameterPlan, ParameterTable, parse_named_parameters
from stmtspec.statement import (
    BatchResult,
    CallableStatement,
    ExecuteResult,
    PreparedStatement,
    QueryCursor,
    StatementGroup,
    StaticStatement,
    UpdateResult,
)

__all__ = (
    "BatchResult",
    "CallableStatement",
    "DriverError",
    "ExecuteResult",
    "IllegalStateError",
    "InvalidResultError",
    "MissingParameterError",
    "NamedParameterPlan",
    "ParameterError",
    "ParameterTable",
    "PreparedStatement",
    "ProcessingError",
    "QueryCursor",
    "SQLBuilderError",
    "StatementClosedError",
    "StatementConfig",
    "StatementGroup",
    "StatementOptions",
    "StaticStatement",
    "StmtSpecError",
    "UnknownParameterError",
    "UpdateResult",
    "__version__",
    "builder",
    "config",
    "exceptions",
    "get_global_config",
    "load_config_from_env",
    "parameters",
    "parse_named_parameters",
    "set_global_config",
    "statement",
    "utils",
)

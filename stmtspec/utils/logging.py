"""Logging for stmtspec.

All loggers live below the ``stmtspec`` logger. Statements log the commands
they run at DEBUG level through :func:`log_statement`, which attaches the SQL
and the parameter or batch size to the record as structured fields.
:class:`StructuredFormatter` renders those fields as JSON and
:class:`StatementTextFormatter` appends them to a plain text line.
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any, Final, Optional

__all__ = (
    "CorrelationIDFilter",
    "StatementTextFormatter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "log_statement",
    "log_with_context",
    "set_correlation_id",
    "truncate_sql",
)

ROOT_LOGGER_NAME: Final = "stmtspec"
SQL_LOG_LIMIT: Final = 500
"""Longest SQL text written by the formatters, longer commands are cut."""

correlation_id_var: "ContextVar[Optional[str]]" = ContextVar("stmtspec_correlation_id", default=None)


def set_correlation_id(correlation_id: "Optional[str]") -> None:
    """Tag the records logged in the current context with ``correlation_id``, ``None`` clears it."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> "Optional[str]":
    return correlation_id_var.get()


def truncate_sql(sql: str, limit: int = SQL_LOG_LIMIT) -> str:
    """Shorten ``sql`` to ``limit`` characters, marking the cut with ``...``."""
    if len(sql) <= limit:
        return sql
    return f"{sql[:limit]}..."


def _statement_fields(record: logging.LogRecord) -> "dict[str, Any]":
    fields: dict[str, Any] = dict(getattr(record, "extra_fields", None) or {})
    if isinstance(fields.get("sql"), str):
        fields["sql"] = truncate_sql(fields["sql"])
    return fields


class StructuredFormatter(logging.Formatter):
    """Formats records as one JSON object per line.

    The statement fields of a record (``sql``, ``parameter_count``,
    ``batch_size``...) become top-level keys of the object.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if correlation_id := get_correlation_id():
            entry["correlation_id"] = correlation_id
        entry.update(_statement_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class StatementTextFormatter(logging.Formatter):
    """Plain text formatter appending the statement fields as ``key=value`` pairs."""

    def __init__(self, fmt: "Optional[str]" = None, datefmt: "Optional[str]" = None) -> None:
        super().__init__(fmt or "%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _statement_fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{key}={value!r}" for key, value in fields.items())
        return f"{line} [{pairs}]"


class CorrelationIDFilter(logging.Filter):
    """Copies the context's correlation ID onto each record as ``correlation_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if correlation_id := get_correlation_id():
            record.correlation_id = correlation_id
        return True


def get_logger(name: "Optional[str]" = None) -> logging.Logger:
    """Return the ``stmtspec`` logger, or the child logger ``name`` below it."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    extra_handlers: "Optional[list[logging.Handler]]" = None,
    stream: Any = None,
) -> None:
    """Send stmtspec records to ``stream`` (stdout by default) instead of the root logger.

    Args:
        level: Level name, ``DEBUG`` shows every command run.
        format_style: ``"structured"`` for JSON lines, anything else for text.
        extra_handlers: Handlers added next to the stream handler.
        stream: Where the stream handler writes.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    formatter: logging.Formatter = StructuredFormatter() if format_style == "structured" else StatementTextFormatter()
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    for extra_handler in extra_handlers or ():
        root_logger.addHandler(extra_handler)
    root_logger.propagate = False

    log_with_context(
        root_logger,
        logging.DEBUG,
        "stmtspec logging configured",
        format_style=format_style,
        handlers_count=len(root_logger.handlers),
    )


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log ``message`` with ``extra_fields`` attached to the record as ``extra_fields``."""
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={"extra_fields": extra_fields}, stacklevel=2)


def log_statement(
    logger: logging.Logger,
    message: str,
    sql: "Optional[str]",
    *,
    parameter_count: "Optional[int]" = None,
    batch_size: "Optional[int]" = None,
    **extra_fields: Any,
) -> None:
    """Log a command at DEBUG level.

    ``parameter_count`` and ``batch_size`` are only recorded when given.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    fields: dict[str, Any] = {"sql": sql}
    if parameter_count is not None:
        fields["parameter_count"] = parameter_count
    if batch_size is not None:
        fields["batch_size"] = batch_size
    fields.update(extra_fields)
    logger.log(logging.DEBUG, message, extra={"extra_fields": fields}, stacklevel=2)

"""Unit tests for the logging helpers."""

import io
import json
import logging
from collections.abc import Generator

import pytest

from stmtspec.utils.logging import (
    CorrelationIDFilter,
    StatementTextFormatter,
    StructuredFormatter,
    configure_logging,
    get_correlation_id,
    get_logger,
    log_statement,
    log_with_context,
    set_correlation_id,
    truncate_sql,
)


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Generator[None, None, None]:
    root = logging.getLogger("stmtspec")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate
    set_correlation_id(None)


def _record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("stmtspec.test", logging.INFO, __file__, 1, message, (), None)


def test_get_logger_prefixes_name() -> None:
    assert get_logger("statement").name == "stmtspec.statement"
    assert get_logger("stmtspec.config").name == "stmtspec.config"
    assert get_logger().name == "stmtspec"


def test_get_logger_adds_filter_once() -> None:
    logger = get_logger("filter_once")
    get_logger("filter_once")

    assert sum(isinstance(f, CorrelationIDFilter) for f in logger.filters) == 1


def test_correlation_id_roundtrip() -> None:
    set_correlation_id("abc-123")

    assert get_correlation_id() == "abc-123"


def test_structured_formatter_outputs_json() -> None:
    set_correlation_id("req-1")
    record = _record("Executing static command")
    record.extra_fields = {"commands": 3}

    entry = json.loads(StructuredFormatter().format(record))

    assert entry["message"] == "Executing static command"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "stmtspec.test"
    assert entry["correlation_id"] == "req-1"
    assert entry["commands"] == 3


def test_correlation_filter_sets_attribute() -> None:
    set_correlation_id("req-2")
    record = _record()

    assert CorrelationIDFilter().filter(record) is True
    assert record.correlation_id == "req-2"  # type: ignore[attr-defined]


def test_configure_logging_installs_handlers() -> None:
    extra = logging.NullHandler()

    configure_logging(level="debug", format_style="simple", extra_handlers=[extra])

    root = logging.getLogger("stmtspec")
    assert root.level == logging.DEBUG
    assert extra in root.handlers
    assert root.propagate is False


def test_log_with_context(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("context_test")

    with caplog.at_level(logging.DEBUG, logger="stmtspec.context_test"):
        log_with_context(logger, logging.DEBUG, "Batch executed", commands=2)

    assert caplog.records[-1].getMessage() == "Batch executed"
    assert caplog.records[-1].extra_fields == {"commands": 2}  # type: ignore[attr-defined]


def test_log_with_context_skips_disabled_levels(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("context_quiet")

    with caplog.at_level(logging.WARNING, logger="stmtspec.context_quiet"):
        log_with_context(logger, logging.DEBUG, "hidden")

    assert not caplog.records


def test_truncate_sql() -> None:
    assert truncate_sql("SELECT 1", limit=8) == "SELECT 1"
    assert truncate_sql("SELECT 1", limit=6) == "SELECT..."


def test_structured_formatter_emits_statement_fields() -> None:
    record = _record("Executing prepared command")
    record.extra_fields = {"sql": "SELECT " + "x" * 600, "parameter_count": 2}

    entry = json.loads(StructuredFormatter().format(record))

    assert entry["parameter_count"] == 2
    assert entry["sql"].endswith("...")
    assert len(entry["sql"]) == 503
    assert record.extra_fields["sql"].endswith("x")  # type: ignore[attr-defined]


def test_text_formatter_appends_statement_fields() -> None:
    record = _record("Executing prepared batch")
    record.extra_fields = {"sql": "INSERT INTO city VALUES (?)", "batch_size": 3}

    line = StatementTextFormatter("%(message)s").format(record)

    assert line == "Executing prepared batch [sql='INSERT INTO city VALUES (?)' batch_size=3]"
    assert StatementTextFormatter("%(message)s").format(_record("plain")) == "plain"


def test_log_statement(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("statement_test")

    with caplog.at_level(logging.DEBUG, logger="stmtspec.statement_test"):
        log_statement(logger, "Executing prepared command", "SELECT ?", parameter_count=1)
        log_statement(logger, "Executing static command", "SELECT 1")

    first, second = caplog.records
    assert first.getMessage() == "Executing prepared command"
    assert first.extra_fields == {"sql": "SELECT ?", "parameter_count": 1}  # type: ignore[attr-defined]
    assert second.extra_fields == {"sql": "SELECT 1"}  # type: ignore[attr-defined]
    assert first.funcName == "test_log_statement"


def test_log_statement_skips_when_debug_is_disabled(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("statement_quiet")

    with caplog.at_level(logging.INFO, logger="stmtspec.statement_quiet"):
        log_statement(logger, "Executing static command", "SELECT 1")

    assert not caplog.records


def test_configured_logging_writes_statement_json_lines() -> None:
    stream = io.StringIO()
    configure_logging(level="DEBUG", stream=stream)

    log_statement(get_logger("statement_json"), "Executing prepared batch", "INSERT INTO t VALUES (?)", batch_size=2)

    entries = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert entries[0]["message"] == "stmtspec logging configured"
    assert entries[-1]["message"] == "Executing prepared batch"
    assert entries[-1]["logger"] == "stmtspec.statement_json"
    assert entries[-1]["sql"] == "INSERT INTO t VALUES (?)"
    assert entries[-1]["batch_size"] == 2

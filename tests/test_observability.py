from __future__ import annotations

import json
import logging
import uuid

import pytest

from todo_mcp.observability import InMemoryMetrics, StructuredFormatter, ToolMetrics, format_metrics, setup_logger
from todo_mcp.security import AuthContext, build_auth_backend, load_auth_config


@pytest.fixture
def logger_name():
    """A logger nobody else touches, removed again after the test."""
    name = f"todo_mcp.test.{uuid.uuid4().hex}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def _structured_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if isinstance(h.formatter, StructuredFormatter)]


def _format(logger: logging.Logger, msg: str, **extra) -> str:
    formatter = _structured_handlers(logger)[0].formatter
    record = logging.LogRecord(logger.name, logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return formatter.format(record)


def test_tool_metrics_average() -> None:
    m = ToolMetrics()
    assert m.avg_latency_ms == 0.0
    m.observe(10.0, error=False)
    m.observe(20.0, error=True)
    assert m.calls == 2
    assert m.errors == 1
    assert m.avg_latency_ms == 15.0


def test_in_memory_metrics_snapshot() -> None:
    metrics = InMemoryMetrics()
    metrics.record("create_todo", 4.0, error=False)
    metrics.record("create_todo", 2.0, error=True)

    snapshot = metrics.snapshot()

    assert snapshot == {"create_todo": {"calls": 2.0, "errors": 1.0, "avg_latency_ms": 3.0}}
    assert json.loads(format_metrics(metrics)) == snapshot


def test_setup_logger_uses_config_level(logger_name: str) -> None:
    logger = setup_logger({"server": {"log_level": "debug"}}, name=logger_name)

    assert logger.name == logger_name
    assert logger.level == logging.DEBUG
    assert len(_structured_handlers(logger)) == 1
    assert logger.propagate is False


def test_setup_logger_is_idempotent(logger_name: str) -> None:
    setup_logger({}, name=logger_name)
    logger = setup_logger({}, name=logger_name)
    assert len(_structured_handlers(logger)) == 1


def test_setup_logger_ignores_foreign_handlers(logger_name: str) -> None:
    logger = logging.getLogger(logger_name)
    logger.addHandler(logging.NullHandler())

    setup_logger({}, name=logger_name)

    assert len(_structured_handlers(logger)) == 1


def test_formatter_fills_missing_fields(logger_name: str) -> None:
    logger = setup_logger({}, name=logger_name)

    line = _format(logger, "hello")

    assert json.loads(line)["tool"] == ""
    assert json.loads(line)["msg"] == "hello"


def test_formatter_escapes_quotes_and_newlines(logger_name: str) -> None:
    logger = setup_logger({}, name=logger_name)

    line = _format(logger, 'Unknown tool: a"b\nc', tool='a"b\nc', duration_ms="1.50")

    assert "\n" not in line
    parsed = json.loads(line)
    assert parsed["msg"] == 'Unknown tool: a"b\nc'
    assert parsed["tool"] == 'a"b\nc'
    assert parsed["duration_ms"] == "1.50"


def test_auth_backend_is_passthrough() -> None:
    assert load_auth_config({}).mode == "none"
    assert load_auth_config({"security": {"auth": {"mode": "jwt"}}}).mode == "jwt"
    backend = build_auth_backend({})
    assert backend.authenticate(None) == AuthContext()
    assert backend.authenticate({"user_id": 42}) == AuthContext(user_id="42")

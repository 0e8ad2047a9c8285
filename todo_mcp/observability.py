import json
import logging
import sys
import threading
from dataclasses import dataclass
from typing import Any, Dict

LOGGER_NAME = "todo_mcp"


class StructuredFormatter(logging.Formatter):
    """Formatter that fills in structured fields a log call did not pass via ``extra``.

    String fields are JSON-escaped so a quote or newline in a tool name or
    message cannot break the line.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.tool_json = _escape(getattr(record, "tool", ""))
        record.duration_ms_json = _escape(getattr(record, "duration_ms", ""))
        record.message_json = _escape(record.getMessage())
        return super().format(record)


def _escape(value: Any) -> str:
    return json.dumps(str(value), ensure_ascii=False)[1:-1]


def setup_logger(config: Dict[str, Any], name: str = LOGGER_NAME) -> logging.Logger:
    logger = logging.getLogger(name)
    if any(isinstance(h.formatter, StructuredFormatter) for h in logger.handlers):
        return logger
    server_cfg = config.get("server", {})
    level_name = str(server_cfg.get("log_level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)
    # stdout carries the JSON-RPC stream, logs must stay on stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(
        '{"ts":"%(asctime)s","level":"%(levelname)s","tool":"%(tool_json)s",'
        '"duration_ms":"%(duration_ms_json)s","msg":"%(message_json)s"}'
    ))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


@dataclass
class ToolMetrics:
    calls: int = 0
    errors: int = 0
    total_latency_ms: float = 0.0

    def observe(self, duration_ms: float, error: bool) -> None:
        self.calls += 1
        self.total_latency_ms += float(duration_ms)
        if error:
            self.errors += 1

    @property
    def avg_latency_ms(self) -> float:
        if self.calls == 0:
            return 0.0
        return self.total_latency_ms / self.calls


class InMemoryMetrics:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tools: Dict[str, ToolMetrics] = {}

    def record(self, tool: str, duration_ms: float, error: bool) -> None:
        with self._lock:
            metrics = self._tools.get(tool)
            if metrics is None:
                metrics = ToolMetrics()
                self._tools[tool] = metrics
            metrics.observe(duration_ms, error)

    def snapshot(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            data: Dict[str, Dict[str, float]] = {}
            for name, m in self._tools.items():
                data[name] = {
                    "calls": float(m.calls),
                    "errors": float(m.errors),
                    "avg_latency_ms": float(m.avg_latency_ms),
                }
            return data


def format_metrics(metrics: InMemoryMetrics) -> str:
    snapshot = metrics.snapshot()
    return json.dumps(snapshot, indent=2, sort_keys=True)

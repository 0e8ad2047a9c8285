"""
Tool dispatcher.

Sits between the MCP transport and the tool handlers:
- discovery: the registry rendered as ``mcp.types.Tool`` entries
- invocation: name lookup, handler call, and translation of the handler's
  ``ToolResult`` into either a ``CallToolResult`` or a JSON-RPC ``ErrorData``

Nothing raised by a handler escapes ``call_tool``; every outcome becomes a
response value the transport can send back.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Union
from zoneinfo import ZoneInfo

import mcp.types as types

from .errors import InvalidArguments, NotFound, UnknownTool
from .handlers import DEFAULT_TIMEZONE, Clock, HandlerContext, ToolResult, utc_now
from .observability import LOGGER_NAME, InMemoryMetrics
from .registry import ToolRegistry
from .security import AuthContext
from .store import TodoStore

CallOutcome = Union[types.CallToolResult, types.ErrorData]


def encode_payload(value: Any) -> str:
    """Serialize a handler value for a text content block.

    Plain strings go out verbatim; everything else as 2-space indented JSON
    with keys in declaration order.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False)


def success_envelope(value: Any) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=encode_payload(value))],
    )


def error_envelope(code: int, message: str) -> types.ErrorData:
    return types.ErrorData(code=code, message=message)


class Dispatcher:
    def __init__(
        self,
        store: Optional[TodoStore] = None,
        registry: Optional[ToolRegistry] = None,
        *,
        tz: Optional[ZoneInfo] = None,
        clock: Clock = utc_now,
        metrics: Optional[InMemoryMetrics] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.store = store if store is not None else TodoStore()
        self.registry = registry if registry is not None else ToolRegistry()
        self.metrics = metrics if metrics is not None else InMemoryMetrics()
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self._clock = clock
        self.tz = tz or ZoneInfo(DEFAULT_TIMEZONE)

    def _context(self, auth: Optional[AuthContext]) -> HandlerContext:
        return HandlerContext(
            store=self.store,
            tz=self.tz,
            clock=self._clock,
            auth=auth or AuthContext(),
        )

    def list_tools(self) -> List[types.Tool]:
        return [descriptor.to_tool() for descriptor in self.registry.descriptors()]

    def call_tool(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None,
        auth: Optional[AuthContext] = None,
    ) -> CallOutcome:
        descriptor = self.registry.get(name)
        if descriptor is None:
            unknown = UnknownTool(name)
            self.logger.warning(unknown.message, extra={"tool": name})
            return error_envelope(types.METHOD_NOT_FOUND, unknown.message)

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            self.logger.warning("Arguments must be an object", extra={"tool": name})
            return error_envelope(types.INVALID_PARAMS, f"Arguments for {name} must be an object")

        start = time.perf_counter()
        try:
            result = descriptor.handler(arguments, self._context(auth))
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000.0
            self.metrics.record(name, duration_ms, error=True)
            self.logger.exception(
                f"Tool {name} failed unexpectedly",
                extra={"tool": name, "duration_ms": f"{duration_ms:.2f}"},
            )
            return error_envelope(types.INTERNAL_ERROR, f"Tool {name} failed: {exc}")

        duration_ms = (time.perf_counter() - start) * 1000.0
        self.metrics.record(name, duration_ms, error=not result.ok)
        extra = {"tool": name, "duration_ms": f"{duration_ms:.2f}"}
        outcome = self._to_envelope(result)
        if isinstance(outcome, types.ErrorData):
            self.logger.info(f"Tool {name} rejected: {outcome.message}", extra=extra)
        else:
            self.logger.info(f"Tool {name} executed successfully", extra=extra)
        return outcome

    def _to_envelope(self, result: ToolResult) -> CallOutcome:
        if result.ok:
            return success_envelope(result.value)
        error = result.error
        if isinstance(error, InvalidArguments):
            return error_envelope(types.INVALID_PARAMS, error.message)
        if isinstance(error, NotFound):
            return error_envelope(types.INTERNAL_ERROR, error.message)
        return error_envelope(types.INTERNAL_ERROR, f"Unexpected tool failure: {error!r}")

    def metrics_snapshot(self) -> Dict[str, Dict[str, float]]:
        return self.metrics.snapshot()

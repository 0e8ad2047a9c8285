"""
MCP transport binding for the dispatcher.

Uses the SDK's low-level ``Server`` rather than ``FastMCP``: tool failures
have to reach the client as JSON-RPC errors (InvalidParams, MethodNotFound)
and not as ``isError`` tool results, so ``tools/call`` is registered as a raw
request handler that raises ``McpError`` with the dispatcher's ``ErrorData``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from .config import get_timezone, resolve_config
from .dispatcher import Dispatcher
from .observability import InMemoryMetrics, format_metrics, setup_logger
from .security import AuthBackend, build_auth_backend
from .store import TodoStore


def build_dispatcher(config: Dict[str, Any], logger: Optional[logging.Logger] = None) -> Dispatcher:
    return Dispatcher(
        store=TodoStore(),
        tz=get_timezone(config),
        metrics=InMemoryMetrics(),
        logger=logger,
    )


def build_server(
    dispatcher: Dispatcher,
    config: Dict[str, Any],
    auth_backend: Optional[AuthBackend] = None,
) -> Server:
    server_cfg = config.get("server", {})
    auth_backend = auth_backend or build_auth_backend(config)
    server: Server = Server(
        str(server_cfg.get("name", "TodoApp MCP Server")),
        version=str(server_cfg.get("version", "0.1.0")),
    )

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return dispatcher.list_tools()

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        params = request.params
        meta = params.meta.model_dump() if params.meta is not None else {}
        auth = auth_backend.authenticate(meta)
        outcome = dispatcher.call_tool(params.name, params.arguments, auth=auth)
        if isinstance(outcome, types.ErrorData):
            raise McpError(outcome)
        return types.ServerResult(outcome)

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def serve(config: Optional[Dict[str, Any]] = None) -> None:
    """Run the TodoApp server on stdin/stdout until the host closes the pipe."""
    config = config if config is not None else resolve_config()
    logger = setup_logger(config)
    dispatcher = build_dispatcher(config, logger=logger)
    server = build_server(dispatcher, config)

    async with stdio_server() as (read_stream, write_stream):
        logger.info("TodoApp MCP server running on stdio")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
    logger.info(f"TodoApp MCP server stopped, tool metrics: {format_metrics(dispatcher.metrics)}")

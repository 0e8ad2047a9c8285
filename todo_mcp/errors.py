"""
Error taxonomy for the TodoApp MCP server.

Two layers live here:
- exception classes, raised where something genuinely cannot continue
  (store lookups, configuration loading);
- failure values, returned by tool handlers and matched by the dispatcher
  to build protocol error responses.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


class TodoMCPError(Exception):
    """Base exception for all TodoApp MCP server errors."""
    pass


class TodoClientError(TodoMCPError):
    """Client-side errors - caller referenced something that does not exist."""
    pass


class TodoServerError(TodoMCPError):
    """Server-side errors - misconfiguration or internal issues."""
    pass


class TodoNotFoundError(TodoClientError):
    """Raised by the store when no todo carries the requested id."""

    def __init__(self, todo_id: Any):
        self.todo_id = todo_id
        super().__init__(f"Todo with id {todo_id} not found")


class ConfigError(TodoServerError):
    """Invalid server configuration."""
    pass


@dataclass(frozen=True)
class InvalidArguments:
    field: str
    expected: str
    message: str


@dataclass(frozen=True)
class NotFound:
    todo_id: Any

    @property
    def message(self) -> str:
        return f"Todo with id {self.todo_id} not found"


@dataclass(frozen=True)
class UnknownTool:
    name: str

    @property
    def message(self) -> str:
        return f"Unknown tool: {self.name}"


ToolFailure = Union[InvalidArguments, NotFound]

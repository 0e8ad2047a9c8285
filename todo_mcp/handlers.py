"""
Tool handlers.

Every handler takes the raw ``arguments`` mapping of a ``tools/call`` request
plus a :class:`HandlerContext`, parses the arguments into a typed request and
returns a :class:`ToolResult`. Parsing finishes before the store is touched,
so a rejected call never consumes an id or mutates a todo.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Union
from zoneinfo import ZoneInfo

from .errors import InvalidArguments, NotFound, TodoNotFoundError, ToolFailure
from .security import AuthContext
from .store import TodoStore

DEFAULT_TIMEZONE = "Asia/Tokyo"

Clock = Callable[[], datetime]
Arguments = Mapping[str, Any]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class HandlerContext:
    store: TodoStore
    tz: ZoneInfo = field(default_factory=lambda: ZoneInfo(DEFAULT_TIMEZONE))
    clock: Clock = utc_now
    auth: AuthContext = field(default_factory=AuthContext)


@dataclass(frozen=True)
class ToolResult:
    ok: bool
    value: Any = None
    error: Optional[ToolFailure] = None

    @staticmethod
    def success(value: Any) -> "ToolResult":
        return ToolResult(ok=True, value=value)

    @staticmethod
    def failure(error: ToolFailure) -> "ToolResult":
        return ToolResult(ok=False, error=error)


# -------------------------
# Typed requests
# -------------------------

@dataclass(frozen=True)
class CreateTodoRequest:
    text: str


@dataclass(frozen=True)
class UpdateTodoRequest:
    id: Union[int, float]
    completed: bool


@dataclass(frozen=True)
class DeleteTodoRequest:
    id: Union[int, float]


def _is_number(value: Any) -> bool:
    # bool is an int subclass in Python but never a JSON number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _normalize_id(value: Union[int, float]) -> Union[int, float]:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def parse_create_todo(arguments: Arguments) -> Union[CreateTodoRequest, InvalidArguments]:
    text = arguments.get("text")
    if not isinstance(text, str):
        return InvalidArguments("text", "string", "Text must be a string")
    if not text:
        return InvalidArguments("text", "non-empty string", "Text must be a non-empty string")
    return CreateTodoRequest(text=text)


def parse_update_todo(arguments: Arguments) -> Union[UpdateTodoRequest, InvalidArguments]:
    todo_id = arguments.get("id")
    completed = arguments.get("completed")
    if not _is_number(todo_id):
        return InvalidArguments("id", "number", "Invalid arguments for update_todo")
    if not isinstance(completed, bool):
        return InvalidArguments("completed", "boolean", "Invalid arguments for update_todo")
    return UpdateTodoRequest(id=_normalize_id(todo_id), completed=completed)


def parse_delete_todo(arguments: Arguments) -> Union[DeleteTodoRequest, InvalidArguments]:
    todo_id = arguments.get("id")
    if not _is_number(todo_id):
        return InvalidArguments("id", "number", "ID must be a number")
    return DeleteTodoRequest(id=_normalize_id(todo_id))


# -------------------------
# Handlers
# -------------------------

def create_todo(arguments: Arguments, ctx: HandlerContext) -> ToolResult:
    request = parse_create_todo(arguments)
    if isinstance(request, InvalidArguments):
        return ToolResult.failure(request)
    todo = ctx.store.create(request.text)
    return ToolResult.success(todo.to_dict())


def list_todos(arguments: Arguments, ctx: HandlerContext) -> ToolResult:
    return ToolResult.success([todo.to_dict() for todo in ctx.store.list()])


def update_todo(arguments: Arguments, ctx: HandlerContext) -> ToolResult:
    request = parse_update_todo(arguments)
    if isinstance(request, InvalidArguments):
        return ToolResult.failure(request)
    try:
        todo = ctx.store.update(request.id, request.completed)
    except TodoNotFoundError as exc:
        return ToolResult.failure(NotFound(exc.todo_id))
    return ToolResult.success(todo.to_dict())


def delete_todo(arguments: Arguments, ctx: HandlerContext) -> ToolResult:
    request = parse_delete_todo(arguments)
    if isinstance(request, InvalidArguments):
        return ToolResult.failure(request)
    try:
        ctx.store.delete(request.id)
    except TodoNotFoundError as exc:
        return ToolResult.failure(NotFound(exc.todo_id))
    return ToolResult.success({"success": True})


def format_locale_time(moment: datetime) -> str:
    """Render ``moment`` the way ja-JP locale prints it: ``2025/3/7 9:05:01``."""
    return (
        f"{moment.year}/{moment.month}/{moment.day} "
        f"{moment.hour}:{moment.minute:02d}:{moment.second:02d}"
    )


def get_current_time(arguments: Arguments, ctx: HandlerContext) -> ToolResult:
    now = ctx.clock().astimezone(ctx.tz)
    return ToolResult.success(format_locale_time(now))


Handler = Callable[[Arguments, HandlerContext], ToolResult]

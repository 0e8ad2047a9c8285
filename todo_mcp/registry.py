from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

import mcp.types as types

from . import handlers
from .handlers import Handler


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: Handler

    def to_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


TOOLS: Tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="create_todo",
        description="Create a new todo item",
        input_schema={
            "type": "object",
            "properties": {
                "text": {"type": "string", "description": "Todo item text"},
            },
            "required": ["text"],
        },
        handler=handlers.create_todo,
    ),
    ToolDescriptor(
        name="list_todos",
        description="List all todo items",
        input_schema={"type": "object", "properties": {}},
        handler=handlers.list_todos,
    ),
    ToolDescriptor(
        name="update_todo",
        description="Update a todo item (e.g., mark as complete)",
        input_schema={
            "type": "object",
            "properties": {
                "id": {"type": "number", "description": "Todo item ID"},
                "completed": {"type": "boolean", "description": "Completion status"},
            },
            "required": ["id", "completed"],
        },
        handler=handlers.update_todo,
    ),
    ToolDescriptor(
        name="delete_todo",
        description="Delete a todo item",
        input_schema={
            "type": "object",
            "properties": {
                "id": {"type": "number", "description": "Todo item ID"},
            },
            "required": ["id"],
        },
        handler=handlers.delete_todo,
    ),
    ToolDescriptor(
        name="get_current_time",
        description="Get the current time in Japan",
        input_schema={"type": "object", "properties": {}},
        handler=handlers.get_current_time,
    ),
)


class ToolRegistry:
    """Name-keyed, order-preserving catalog of tool descriptors."""

    def __init__(self, descriptors: Iterable[ToolDescriptor] = TOOLS) -> None:
        self._tools: Dict[str, ToolDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in self._tools:
                raise ValueError(f"Tool {descriptor.name} registered twice")
            self._tools[descriptor.name] = descriptor

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def get(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools.keys())

    def descriptors(self) -> Tuple[ToolDescriptor, ...]:
        return tuple(self._tools.values())

"""In-memory todo list and clock tools served over MCP stdio."""

from .dispatcher import Dispatcher
from .registry import TOOLS, ToolDescriptor, ToolRegistry
from .store import TodoItem, TodoStore

__all__ = [
    "Dispatcher",
    "TOOLS",
    "TodoItem",
    "TodoStore",
    "ToolDescriptor",
    "ToolRegistry",
]

__version__ = "0.1.0"

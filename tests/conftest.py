from __future__ import annotations

from datetime import datetime, timezone

import pytest

from todo_mcp.dispatcher import Dispatcher
from todo_mcp.store import TodoStore

# 2025-03-07 00:05:01 UTC == 2025-03-07 09:05:01 in Asia/Tokyo
FIXED_NOW = datetime(2025, 3, 7, 0, 5, 1, tzinfo=timezone.utc)


@pytest.fixture
def store() -> TodoStore:
    return TodoStore()


@pytest.fixture
def dispatcher(store: TodoStore) -> Dispatcher:
    return Dispatcher(store=store, clock=lambda: FIXED_NOW)

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Union

from .errors import TodoNotFoundError

TodoId = Union[int, float]


@dataclass(frozen=True)
class TodoItem:
    id: int
    text: str
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TodoStore:
    """
    Volatile, insertion-ordered collection of todos.

    Ids start at 1, grow by one per create and are never handed out twice,
    even when the most recent todo is deleted. Mutations take a lock so the
    counter stays monotonic if requests ever overlap.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._todos: List[TodoItem] = []
        self._next_id = 1

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._todos)

    def create(self, text: str) -> TodoItem:
        with self._lock:
            todo = TodoItem(id=self._next_id, text=text, completed=False)
            self._next_id += 1
            self._todos.append(todo)
            return todo

    def list(self) -> List[TodoItem]:
        return list(self._todos)

    def get(self, todo_id: TodoId) -> TodoItem:
        for todo in self._todos:
            if todo.id == todo_id:
                return todo
        raise TodoNotFoundError(todo_id)

    def update(self, todo_id: TodoId, completed: bool) -> TodoItem:
        with self._lock:
            for index, todo in enumerate(self._todos):
                if todo.id == todo_id:
                    # text is fixed at creation, only completed is swapped in
                    updated = replace(todo, completed=completed)
                    self._todos[index] = updated
                    return updated
            raise TodoNotFoundError(todo_id)

    def delete(self, todo_id: TodoId) -> None:
        with self._lock:
            for index, todo in enumerate(self._todos):
                if todo.id == todo_id:
                    del self._todos[index]
                    return
            raise TodoNotFoundError(todo_id)

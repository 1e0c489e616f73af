from __future__ import annotations

from collections import deque
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class UndoBuffer(Generic[T]):
    """Last ``capacity`` deleted records, newest first out."""

    def __init__(self, capacity: int = 1):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._items: deque[T] = deque(maxlen=capacity)

    def push(self, item: T) -> None:
        self._items.append(item)

    def peek(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    def pop(self) -> Optional[T]:
        return self._items.pop() if self._items else None

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

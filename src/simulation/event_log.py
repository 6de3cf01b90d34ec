from __future__ import annotations

from collections import deque
from typing import Deque, Iterator, List

from .entities import LogEvent


class EventLog:
    """Append-only ring buffer holding the newest ``capacity`` events."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("Event log capacity must be at least 1")
        self.capacity = capacity
        self._entries: Deque[LogEvent] = deque(maxlen=capacity)

    def append(self, event: LogEvent) -> None:
        self._entries.append(event)

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> List[LogEvent]:
        return list(self._entries)

    def __iter__(self) -> Iterator[LogEvent]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

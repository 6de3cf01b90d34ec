from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional


class CompletionKind(str, Enum):
    MOVE = "move"
    LOADING = "loading"


@dataclass(order=True, frozen=True)
class Completion:
    """A leg that finishes at ``due``; equal due times fire in scheduling order."""

    due: float
    seq: int
    car_id: int = field(compare=False)
    kind: CompletionKind = field(compare=False)
    floor: int = field(compare=False)


class CompletionQueue:
    """Delay queue of pending leg completions keyed by due time."""

    def __init__(self) -> None:
        self._heap: List[Completion] = []
        self._seq = itertools.count()

    def schedule(self, due: float, car_id: int, kind: CompletionKind, floor: int) -> Completion:
        completion = Completion(due=due, seq=next(self._seq), car_id=car_id, kind=kind, floor=floor)
        heapq.heappush(self._heap, completion)
        return completion

    def pop_due(self, now: float) -> Iterator[Completion]:
        while self._heap and self._heap[0].due <= now:
            yield heapq.heappop(self._heap)

    def peek_due(self) -> Optional[float]:
        if not self._heap:
            return None
        return self._heap[0].due

    def __len__(self) -> int:
        return len(self._heap)

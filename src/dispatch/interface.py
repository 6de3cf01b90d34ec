from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional, Protocol, Sequence, Set


class Direction(str, Enum):
    IDLE = "idle"
    UP = "up"
    DOWN = "down"


class MovementState(str, Enum):
    AVAILABLE = "available"
    MOVING = "moving"
    LOADING = "loading"


@dataclass
class Car:
    """One elevator car in the fleet."""

    car_id: int
    current_floor: int = 1
    direction: Direction = Direction.IDLE
    movement_state: MovementState = MovementState.AVAILABLE
    destinations: Set[int] = field(default_factory=set)
    last_activity: float = 0.0

    @property
    def passenger_count(self) -> int:
        return len(self.destinations)

    def is_available(self) -> bool:
        return self.movement_state is MovementState.AVAILABLE

    def is_busy(self) -> bool:
        return self.movement_state in (MovementState.MOVING, MovementState.LOADING)

    def copy(self) -> "Car":
        return replace(self, destinations=set(self.destinations))


@dataclass
class Call:
    """A pending hall call waiting for pickup."""

    call_id: str
    floor: int
    direction: Direction
    timestamp: float
    assigned_car: Optional[int] = None

    def copy(self) -> "Call":
        return replace(self)


class Dispatcher(Protocol):
    """Strategy interface for assigning calls and routing cars.

    Implementations are stateless: every decision is computed from the
    arguments alone and none of them may be mutated.
    """

    def find_best_car(self, cars: Sequence[Car], call: Call) -> Optional[Car]:
        """Return the car that should serve ``call`` or ``None`` if no car is available."""
        ...

    def should_stop(self, car: Car, floor: int, pending_calls: Iterable[Call]) -> bool:
        ...

    def next_destination(self, car: Car, pending_calls: Iterable[Call]) -> Optional[int]:
        """Return the floor the car should head for next, if any."""
        ...

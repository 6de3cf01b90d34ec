from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LogKind(str, Enum):
    CALL = "call"
    PICKUP = "pickup"
    DROPOFF = "dropoff"
    MOVEMENT = "movement"
    SYSTEM = "system"


@dataclass(frozen=True)
class LogEvent:
    """Immutable record of something the control loop did."""

    event_id: str
    timestamp: float
    kind: LogKind
    message: str
    car_id: Optional[int] = None
    floor: Optional[int] = None

    def describe(self) -> str:
        car_info = f"[Car {self.car_id}] " if self.car_id is not None else ""
        floor_info = f"[Floor {self.floor}] " if self.floor is not None else ""
        return f"{car_info}{floor_info}{self.message}"

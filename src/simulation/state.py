from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Tuple

from dispatch import Call, Car

from .entities import LogEvent


@dataclass(frozen=True)
class SystemMetrics:
    uptime: float
    total_processed: int
    pending_count: int
    active_count: int
    idle_count: int


@dataclass(frozen=True)
class SystemSnapshot:
    """Read-only copy of the control loop state handed to consumers."""

    cars: Tuple[Car, ...]
    pending_calls: Tuple[Call, ...]
    logs: Tuple[LogEvent, ...]
    is_running: bool
    start_time: float
    current_time: float
    total_processed: int

    def to_dict(self) -> Dict:
        return {
            "time": self.current_time,
            "start_time": self.start_time,
            "is_running": self.is_running,
            "total_processed": self.total_processed,
            "cars": [
                {
                    "id": car.car_id,
                    "current_floor": car.current_floor,
                    "direction": car.direction.value,
                    "movement_state": car.movement_state.value,
                    "destinations": sorted(car.destinations),
                    "passenger_count": car.passenger_count,
                    "last_activity": car.last_activity,
                }
                for car in self.cars
            ],
            "pending_calls": [
                {
                    "id": call.call_id,
                    "floor": call.floor,
                    "direction": call.direction.value,
                    "timestamp": call.timestamp,
                    "assigned_car": call.assigned_car,
                }
                for call in self.pending_calls
            ],
            "logs": [
                {**asdict(event), "kind": event.kind.value}
                for event in self.logs
            ],
        }

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .interface import Call, Car, Direction
from .utils import can_pick_up_without_reversing, candidate_floors, has_assigned_call_at


class NearestCarDispatcher:
    """Assigns the closest car, preferring cars that need not reverse."""

    def find_best_car(self, cars: Sequence[Car], call: Call) -> Optional[Car]:
        available = [car for car in cars if car.is_available()]
        if not available:
            return None
        in_path = [car for car in available if can_pick_up_without_reversing(car, call)]
        return self._closest(in_path or available, call.floor)

    def should_stop(self, car: Car, floor: int, pending_calls: Iterable[Call]) -> bool:
        if floor in car.destinations:
            return True
        return has_assigned_call_at(car, floor, pending_calls)

    def next_destination(self, car: Car, pending_calls: Iterable[Call]) -> Optional[int]:
        floors = candidate_floors(car, pending_calls)
        if not floors:
            return None

        if car.direction in (Direction.UP, Direction.IDLE):
            above = [floor for floor in floors if floor > car.current_floor]
            if above:
                return above[0]
        if car.direction in (Direction.DOWN, Direction.IDLE):
            below = [floor for floor in floors if floor < car.current_floor]
            if below:
                return below[-1]
        return floors[0]

    def _closest(self, cars: List[Car], floor: int) -> Car:
        closest = cars[0]
        for car in cars[1:]:
            if abs(car.current_floor - floor) < abs(closest.current_floor - floor):
                closest = car
        return closest

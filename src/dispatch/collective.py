from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .interface import Call, Car, Direction
from .utils import (
    can_pick_up_without_reversing,
    candidate_floors,
    has_assigned_call_at,
    nearest_floor,
)


class CollectiveDispatcher:
    """Score-based car assignment with up/down (collective) routing.

    Cars keep sweeping in their current direction while there is work ahead
    of them and only reverse once that side is exhausted.
    """

    distance_weight = 10
    same_direction_bonus = 50
    idle_bonus = 25
    in_path_bonus = 75
    load_penalty = 5

    def score_car(self, car: Car, call: Call) -> int:
        distance = abs(car.current_floor - call.floor)
        score = max(0, 100 - distance * self.distance_weight)
        if car.direction == call.direction:
            score += self.same_direction_bonus
        if car.direction is Direction.IDLE:
            score += self.idle_bonus
        if can_pick_up_without_reversing(car, call):
            score += self.in_path_bonus
        score -= len(car.destinations) * self.load_penalty
        return score

    def find_best_car(self, cars: Sequence[Car], call: Call) -> Optional[Car]:
        best_car: Optional[Car] = None
        best_score = 0
        for car in cars:
            if not car.is_available():
                continue
            score = self.score_car(car, call)
            if best_car is None or score > best_score:
                best_car = car
                best_score = score
        return best_car

    def should_stop(self, car: Car, floor: int, pending_calls: Iterable[Call]) -> bool:
        if floor in car.destinations:
            return True
        return has_assigned_call_at(car, floor, pending_calls)

    def next_destination(self, car: Car, pending_calls: Iterable[Call]) -> Optional[int]:
        floors = candidate_floors(car, pending_calls)
        if not floors:
            return None

        if car.direction is Direction.UP:
            above = [floor for floor in floors if floor > car.current_floor]
            if above:
                return above[0]
        elif car.direction is Direction.DOWN:
            below = [floor for floor in floors if floor < car.current_floor]
            if below:
                return below[-1]

        # Idle, or nothing left ahead in the current direction
        return nearest_floor(floors, car.current_floor)

from __future__ import annotations

from typing import Iterable, List

from .interface import Call, Car, Direction


def candidate_floors(car: Car, pending_calls: Iterable[Call]) -> List[int]:
    """Drop-off floors plus floors of calls assigned to the car, ascending."""

    floors = set(car.destinations)
    floors.update(call.floor for call in pending_calls if call.assigned_car == car.car_id)
    return sorted(floors)


def nearest_floor(floors: List[int], current_floor: int) -> int:
    """Return the floor closest to ``current_floor``.

    ``floors`` must be ascending; the first strictly closer floor wins, so ties
    resolve toward the lower floor.
    """

    closest = floors[0]
    for floor in floors[1:]:
        if abs(floor - current_floor) < abs(closest - current_floor):
            closest = floor
    return closest


def can_pick_up_without_reversing(car: Car, call: Call) -> bool:
    if car.direction is Direction.IDLE:
        return True
    if car.direction != call.direction:
        return False
    if call.direction is Direction.UP:
        return car.current_floor <= call.floor
    return car.current_floor >= call.floor


def is_direction_compatible(call: Call, direction: Direction) -> bool:
    return direction is Direction.IDLE or call.direction == direction


def has_assigned_call_at(car: Car, floor: int, pending_calls: Iterable[Call]) -> bool:
    return any(
        call.floor == floor
        and call.assigned_car == car.car_id
        and is_direction_compatible(call, car.direction)
        for call in pending_calls
    )

from __future__ import annotations

import pytest

from dispatch import (
    Call,
    Car,
    CollectiveDispatcher,
    Direction,
    MovementState,
    NearestCarDispatcher,
    get_dispatcher,
)


def make_call(floor: int, direction: Direction, assigned_car=None) -> Call:
    return Call(call_id="call-1", floor=floor, direction=direction, timestamp=0.0, assigned_car=assigned_car)


@pytest.fixture
def dispatcher() -> NearestCarDispatcher:
    return NearestCarDispatcher()


def test_prefers_car_that_need_not_reverse(dispatcher):
    cars = [
        Car(car_id=1, current_floor=6, direction=Direction.DOWN),
        Car(car_id=2, current_floor=2, direction=Direction.UP),
    ]
    assert dispatcher.find_best_car(cars, make_call(5, Direction.UP)).car_id == 2


def test_falls_back_to_closest_available_car(dispatcher):
    cars = [
        Car(car_id=1, current_floor=9, direction=Direction.DOWN),
        Car(car_id=2, current_floor=6, direction=Direction.DOWN),
        Car(car_id=3, current_floor=5, movement_state=MovementState.MOVING),
    ]
    assert dispatcher.find_best_car(cars, make_call(5, Direction.UP)).car_id == 2


def test_returns_none_without_available_cars(dispatcher):
    cars = [Car(car_id=1, movement_state=MovementState.LOADING)]
    assert dispatcher.find_best_car(cars, make_call(5, Direction.UP)) is None


def test_idle_car_heads_up_first(dispatcher):
    car = Car(car_id=1, current_floor=5, destinations={3, 8})
    assert dispatcher.next_destination(car, []) == 8


def test_down_car_takes_highest_floor_below(dispatcher):
    car = Car(car_id=1, current_floor=6, direction=Direction.DOWN, destinations={2, 4, 9})
    assert dispatcher.next_destination(car, []) == 4


def test_up_car_with_nothing_above_takes_lowest_floor(dispatcher):
    car = Car(car_id=1, current_floor=8, direction=Direction.UP, destinations={3, 6})
    assert dispatcher.next_destination(car, []) == 3


def test_should_stop_matches_collective_rule(dispatcher):
    car = Car(car_id=1, current_floor=5, direction=Direction.DOWN)
    assert dispatcher.should_stop(car, 5, [make_call(5, Direction.DOWN, assigned_car=1)])
    assert not dispatcher.should_stop(car, 5, [make_call(5, Direction.UP, assigned_car=1)])


def test_registry_resolves_names_case_insensitively():
    assert isinstance(get_dispatcher("Collective"), CollectiveDispatcher)
    assert isinstance(get_dispatcher("nearest"), NearestCarDispatcher)


def test_registry_rejects_unknown_names():
    with pytest.raises(ValueError, match="Unknown dispatcher 'scan'"):
        get_dispatcher("scan")

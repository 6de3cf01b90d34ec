from __future__ import annotations

import pytest

from dispatch import Call, Car, CollectiveDispatcher, Direction, MovementState


def make_call(floor: int, direction: Direction, assigned_car=None, call_id: str = "call-1") -> Call:
    return Call(call_id=call_id, floor=floor, direction=direction, timestamp=0.0, assigned_car=assigned_car)


@pytest.fixture
def dispatcher() -> CollectiveDispatcher:
    return CollectiveDispatcher()


class TestScoreCar:
    def test_idle_car_gets_idle_and_in_path_bonuses(self, dispatcher):
        car = Car(car_id=1, current_floor=4)
        assert dispatcher.score_car(car, make_call(5, Direction.UP)) == 90 + 25 + 75

    def test_same_direction_on_approach_side(self, dispatcher):
        car = Car(car_id=1, current_floor=3, direction=Direction.UP)
        assert dispatcher.score_car(car, make_call(5, Direction.UP)) == 80 + 50 + 75

    def test_same_direction_past_the_call_gets_no_path_bonus(self, dispatcher):
        car = Car(car_id=1, current_floor=7, direction=Direction.UP)
        assert dispatcher.score_car(car, make_call(5, Direction.UP)) == 80 + 50

    def test_distance_term_never_negative(self, dispatcher):
        car = Car(car_id=1, current_floor=1, direction=Direction.DOWN)
        assert dispatcher.score_car(car, make_call(20, Direction.UP)) == 0

    def test_destinations_penalise_busy_cars(self, dispatcher):
        car = Car(car_id=1, current_floor=5, destinations={2, 8, 9})
        assert dispatcher.score_car(car, make_call(5, Direction.UP)) == 100 + 25 + 75 - 15


class TestFindBestCar:
    def test_prefers_closer_idle_car(self, dispatcher):
        cars = [Car(car_id=1, current_floor=8), Car(car_id=2, current_floor=4)]
        assert dispatcher.find_best_car(cars, make_call(5, Direction.UP)).car_id == 2

    def test_direction_beats_distance(self, dispatcher):
        cars = [
            Car(car_id=1, current_floor=3, direction=Direction.UP),
            Car(car_id=2, current_floor=4, direction=Direction.DOWN),
        ]
        assert dispatcher.find_best_car(cars, make_call(5, Direction.UP)).car_id == 1

    def test_ties_go_to_first_car_in_fleet_order(self, dispatcher):
        cars = [Car(car_id=3), Car(car_id=1), Car(car_id=2)]
        assert dispatcher.find_best_car(cars, make_call(5, Direction.UP)).car_id == 3

    def test_is_deterministic(self, dispatcher):
        cars = [Car(car_id=i, current_floor=floor) for i, floor in enumerate([2, 6, 6, 9], start=1)]
        call = make_call(6, Direction.DOWN)
        picks = {dispatcher.find_best_car(cars, call).car_id for _ in range(20)}
        assert picks == {2}

    def test_skips_busy_cars(self, dispatcher):
        cars = [
            Car(car_id=1, current_floor=5, movement_state=MovementState.MOVING),
            Car(car_id=2, current_floor=5, movement_state=MovementState.LOADING),
            Car(car_id=3, current_floor=10),
        ]
        assert dispatcher.find_best_car(cars, make_call(5, Direction.UP)).car_id == 3

    def test_returns_none_when_every_car_is_busy(self, dispatcher):
        cars = [Car(car_id=1, movement_state=MovementState.MOVING)]
        assert dispatcher.find_best_car(cars, make_call(5, Direction.UP)) is None

    def test_no_available_car_scores_higher_than_the_pick(self, dispatcher):
        cars = [
            Car(car_id=1, current_floor=2, direction=Direction.UP, destinations={9}),
            Car(car_id=2, current_floor=7, direction=Direction.DOWN, destinations={1, 3}),
            Car(car_id=3, current_floor=5),
            Car(car_id=4, current_floor=6, movement_state=MovementState.MOVING),
        ]
        call = make_call(6, Direction.DOWN)
        best = dispatcher.find_best_car(cars, call)
        best_score = dispatcher.score_car(best, call)
        for car in cars:
            if car.is_available():
                assert dispatcher.score_car(car, call) <= best_score

    def test_does_not_mutate_fleet(self, dispatcher):
        cars = [Car(car_id=1, current_floor=4, destinations={7})]
        dispatcher.find_best_car(cars, make_call(5, Direction.UP))
        assert cars[0] == Car(car_id=1, current_floor=4, destinations={7})


class TestShouldStop:
    def test_stops_for_dropoff(self, dispatcher):
        car = Car(car_id=1, current_floor=5, direction=Direction.UP, destinations={5})
        assert dispatcher.should_stop(car, 5, [])

    def test_stops_for_assigned_call_in_same_direction(self, dispatcher):
        car = Car(car_id=1, current_floor=5, direction=Direction.UP)
        assert dispatcher.should_stop(car, 5, [make_call(5, Direction.UP, assigned_car=1)])

    def test_idle_car_stops_for_either_direction(self, dispatcher):
        car = Car(car_id=1, current_floor=5)
        assert dispatcher.should_stop(car, 5, [make_call(5, Direction.DOWN, assigned_car=1)])

    def test_passes_call_in_opposite_direction(self, dispatcher):
        car = Car(car_id=1, current_floor=5, direction=Direction.UP)
        assert not dispatcher.should_stop(car, 5, [make_call(5, Direction.DOWN, assigned_car=1)])

    def test_ignores_calls_assigned_elsewhere(self, dispatcher):
        car = Car(car_id=1, current_floor=5)
        pending = [make_call(5, Direction.UP, assigned_car=2), make_call(5, Direction.UP, call_id="call-2")]
        assert not dispatcher.should_stop(car, 5, pending)


class TestNextDestination:
    def test_none_without_work(self, dispatcher):
        assert dispatcher.next_destination(Car(car_id=1, current_floor=3), []) is None

    def test_continues_up_before_reversing(self, dispatcher):
        car = Car(car_id=1, current_floor=3, direction=Direction.UP, destinations={2, 5})
        assert dispatcher.next_destination(car, []) == 5

    def test_continues_down_before_reversing(self, dispatcher):
        car = Car(car_id=1, current_floor=6, direction=Direction.DOWN, destinations={2, 4, 8})
        assert dispatcher.next_destination(car, []) == 4

    def test_idle_car_goes_to_nearest(self, dispatcher):
        car = Car(car_id=1, current_floor=5, destinations={3, 8})
        assert dispatcher.next_destination(car, []) == 3

    def test_nearest_ties_resolve_to_lower_floor(self, dispatcher):
        car = Car(car_id=1, current_floor=5, destinations={4, 6})
        assert dispatcher.next_destination(car, []) == 4

    def test_reverses_to_nearest_when_nothing_ahead(self, dispatcher):
        car = Car(car_id=1, current_floor=6, direction=Direction.UP, destinations={2, 4})
        assert dispatcher.next_destination(car, []) == 4

    def test_includes_assigned_call_floors_only(self, dispatcher):
        car = Car(car_id=1, current_floor=5, direction=Direction.UP, destinations={2})
        pending = [
            make_call(9, Direction.DOWN, assigned_car=1),
            make_call(7, Direction.UP, call_id="call-2"),
            make_call(6, Direction.UP, assigned_car=2, call_id="call-3"),
        ]
        assert dispatcher.next_destination(car, pending) == 9

    def test_current_floor_can_be_returned(self, dispatcher):
        car = Car(car_id=1, current_floor=5, direction=Direction.UP)
        pending = [make_call(5, Direction.DOWN, assigned_car=1)]
        assert dispatcher.next_destination(car, pending) == 5

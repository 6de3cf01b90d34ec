from __future__ import annotations

import itertools
import random
import time
from typing import Callable, List, Optional, Set, Union

from dispatch import Call, Car, Direction

from .entities import LogEvent, LogKind
from .errors import IllegalDirection, InvalidFloor

MAX_ATTEMPTS_PER_DESTINATION = 10


class EntityFactory:
    """Builds validated calls, cars and log events for a building of ``num_floors``."""

    def __init__(
        self,
        num_floors: int,
        random_state: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.num_floors = num_floors
        self.random = random_state or random.Random()
        self.clock = clock or time.time
        self._call_ids = itertools.count(1)
        self._event_ids = itertools.count(1)

    def create_call(self, floor: int, direction: Union[Direction, str]) -> Call:
        if isinstance(floor, bool) or not isinstance(floor, int):
            raise InvalidFloor(f"Invalid floor: {floor!r}. Must be an integer")
        if not 1 <= floor <= self.num_floors:
            raise InvalidFloor(f"Invalid floor: {floor}. Must be between 1 and {self.num_floors}")
        call_direction = self._parse_direction(direction)
        if floor == 1 and call_direction is Direction.DOWN:
            raise IllegalDirection("Cannot go down from ground floor")
        if floor == self.num_floors and call_direction is Direction.UP:
            raise IllegalDirection("Cannot go up from top floor")
        return self._new_call(floor, call_direction)

    def create_random_call(self) -> Call:
        floor = self.random.randint(1, self.num_floors)
        direction = self.random.choice((Direction.UP, Direction.DOWN))
        if floor == 1:
            direction = Direction.UP
        if floor == self.num_floors:
            direction = Direction.DOWN
        return self._new_call(floor, direction)

    def create_initial_fleet(self, count: int) -> List[Car]:
        now = self.clock()
        return [Car(car_id=index + 1, current_floor=1, last_activity=now) for index in range(count)]

    def generate_destinations(self, current_floor: int, max_count: int) -> Set[int]:
        """Pick 1..max_count distinct drop-off floors other than ``current_floor``.

        Each slot gets a bounded number of draws; a slot that keeps hitting
        floors already chosen is skipped, so the result may be smaller than
        requested. The first draw can never be rejected, so the result is
        non-empty whenever another floor exists.
        """

        if max_count < 1:
            raise ValueError("max_count must be at least 1")
        choices = [floor for floor in range(1, self.num_floors + 1) if floor != current_floor]
        destinations: Set[int] = set()
        if not choices:
            return destinations
        count = self.random.randint(1, max_count)
        for _ in range(count):
            for _ in range(MAX_ATTEMPTS_PER_DESTINATION):
                destination = self.random.choice(choices)
                if destination not in destinations:
                    destinations.add(destination)
                    break
        return destinations

    def create_log_event(
        self,
        kind: LogKind,
        message: str,
        car_id: Optional[int] = None,
        floor: Optional[int] = None,
    ) -> LogEvent:
        return LogEvent(
            event_id=f"log-{next(self._event_ids)}",
            timestamp=self.clock(),
            kind=kind,
            message=message,
            car_id=car_id,
            floor=floor,
        )

    def _new_call(self, floor: int, direction: Direction) -> Call:
        return Call(
            call_id=f"call-{next(self._call_ids)}",
            floor=floor,
            direction=direction,
            timestamp=self.clock(),
        )

    def _parse_direction(self, direction: Union[Direction, str]) -> Direction:
        try:
            parsed = Direction(direction)
        except ValueError:
            raise IllegalDirection(f"Unknown direction: {direction!r}") from None
        if parsed is Direction.IDLE:
            raise IllegalDirection("Call direction must be 'up' or 'down'")
        return parsed

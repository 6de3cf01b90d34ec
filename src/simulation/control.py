from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional, Union

from dispatch import Call, Car, Direction, Dispatcher, MovementState, get_dispatcher

from .config import SystemConfig
from .entities import LogEvent, LogKind
from .errors import InternalInconsistency
from .event_log import EventLog
from .factory import EntityFactory
from .state import SystemMetrics, SystemSnapshot
from .timers import Completion, CompletionKind, CompletionQueue

logger = logging.getLogger(__name__)

EventHook = Callable[[LogEvent], None]


class ElevatorControlService:
    """Owns the fleet and the call queue and advances them on a simulated clock.

    ``tick`` runs one scheduling pass over the available cars; ``advance``
    moves the clock and fires the move/loading completions that fall due.
    The service is single-writer: callers that share it between tasks must
    serialise access themselves.
    """

    def __init__(
        self,
        config: Optional[SystemConfig] = None,
        dispatcher: Optional[Dispatcher] = None,
        start_time: float = 0.0,
    ) -> None:
        self.config = config or SystemConfig()
        self.config.validate()
        self.current_time = start_time
        self.start_time = start_time
        self.factory = EntityFactory(
            self.config.num_floors,
            random_state=random.Random(self.config.random_seed),
            clock=self.now,
        )
        if dispatcher is None:
            self.dispatcher_name = self.config.dispatcher
            self.dispatcher = get_dispatcher(self.config.dispatcher)
        else:
            self.dispatcher_name = type(dispatcher).__name__
            self.dispatcher = dispatcher
        self.cars: List[Car] = self.factory.create_initial_fleet(self.config.car_count)
        self.pending_calls: List[Call] = []
        self.logs = EventLog(self.config.max_log_entries)
        self.is_running = False
        self.total_processed = 0
        self.event_hooks: Dict[str, List[EventHook]] = {}
        self._completions = CompletionQueue()
        self._log(LogKind.SYSTEM, "Elevator control system initialized")

    def now(self) -> float:
        return self.current_time

    # Calls ---------------------------------------------------------------

    def add_call(self, floor: int, direction: Union[Direction, str]) -> Call:
        call = self.factory.create_call(floor, direction)
        self.submit_call(call)
        return call.copy()

    def generate_random_call(self) -> Call:
        call = self.factory.create_random_call()
        self.submit_call(call)
        return call.copy()

    def submit_call(self, call: Call) -> None:
        best_car = self.dispatcher.find_best_car(self.cars, call)
        if best_car is None:
            self.pending_calls.append(call)
            self._log(
                LogKind.SYSTEM,
                f"No available car for call on floor {call.floor} going {call.direction.value}. Call queued.",
                floor=call.floor,
            )
            return

        call.assigned_car = best_car.car_id
        self.pending_calls.append(call)
        self._log(
            LogKind.CALL,
            f"Floor {call.floor} {call.direction.value} call assigned to Car {best_car.car_id}",
            best_car.car_id,
            call.floor,
        )

    # Scheduling ----------------------------------------------------------

    def step(self, seconds: Optional[float] = None) -> None:
        self.advance(self.config.tick_interval_s if seconds is None else seconds)
        self.tick()

    def tick(self) -> None:
        try:
            for car in self.cars:
                if not car.is_available():
                    continue
                self._handle_stop(car)
                if car.is_available():
                    self._move_to_next_destination(car)
            self._reassign_unassigned_calls()
        except Exception as exc:
            logger.exception("Elevator logic processing failed")
            self._log(LogKind.SYSTEM, f"Error in elevator logic processing: {exc}")

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("Cannot move the clock backwards")
        deadline = self.current_time + seconds
        for completion in self._completions.pop_due(deadline):
            self.current_time = max(self.current_time, completion.due)
            self._complete(completion)
        self.current_time = deadline

    def _handle_stop(self, car: Car) -> None:
        floor = car.current_floor
        if not self.dispatcher.should_stop(car, floor, self.pending_calls):
            return

        if floor in car.destinations:
            self._drop_off(car, floor)

        pickup = next(
            (call for call in self.pending_calls if call.floor == floor and call.assigned_car == car.car_id),
            None,
        )
        if pickup is not None:
            self._pick_up(car, floor, pickup)

    def _drop_off(self, car: Car, floor: int) -> None:
        car.destinations.discard(floor)
        car.last_activity = self.current_time
        self._log(LogKind.DROPOFF, f"Car {car.car_id} passengers disembarked at floor {floor}", car.car_id, floor)

        if not car.destinations:
            car.direction = Direction.IDLE
            self._log(LogKind.SYSTEM, f"Car {car.car_id} is now idle at floor {floor}", car.car_id, floor)

    def _pick_up(self, car: Car, floor: int, call: Call) -> None:
        car.movement_state = MovementState.LOADING
        car.last_activity = self.current_time
        self.pending_calls = [pending for pending in self.pending_calls if pending.call_id != call.call_id]
        self.total_processed += 1
        self._log(LogKind.PICKUP, f"Car {car.car_id} loading passengers at floor {floor}", car.car_id, floor)
        self._completions.schedule(
            self.current_time + self.config.load_duration_s,
            car.car_id,
            CompletionKind.LOADING,
            floor,
        )

    def _move_to_next_destination(self, car: Car) -> None:
        target = self.dispatcher.next_destination(car, self.pending_calls)
        if target is None or target == car.current_floor:
            if car.direction is not Direction.IDLE:
                car.direction = Direction.IDLE
                self._log(
                    LogKind.SYSTEM,
                    f"Car {car.car_id} is now idle at floor {car.current_floor}",
                    car.car_id,
                    car.current_floor,
                )
            return

        car.direction = Direction.UP if target > car.current_floor else Direction.DOWN
        car.movement_state = MovementState.MOVING
        car.last_activity = self.current_time
        self._log(
            LogKind.MOVEMENT,
            f"Car {car.car_id} departing {car.direction.value} from floor {car.current_floor} to floor {target}",
            car.car_id,
            car.current_floor,
        )
        self._completions.schedule(
            self.current_time + self.config.move_duration_s,
            car.car_id,
            CompletionKind.MOVE,
            target,
        )

    def _reassign_unassigned_calls(self) -> None:
        for call in self.pending_calls:
            if call.assigned_car is not None:
                continue
            best_car = self.dispatcher.find_best_car(self.cars, call)
            if best_car is None:
                continue
            call.assigned_car = best_car.car_id
            self._log(
                LogKind.SYSTEM,
                f"Reassigned floor {call.floor} {call.direction.value} call to Car {best_car.car_id}",
                best_car.car_id,
                call.floor,
            )

    # Completions ---------------------------------------------------------

    def _complete(self, completion: Completion) -> None:
        try:
            car = self._get_car(completion.car_id)
            if car is None:
                raise InternalInconsistency(f"Unknown car {completion.car_id}")
            if completion.kind is CompletionKind.MOVE:
                self._finish_move(car, completion.floor)
            else:
                self._finish_loading(car, completion.floor)
        except InternalInconsistency as exc:
            logger.warning("Discarded %s completion: %s", completion.kind.value, exc)
            self._log(
                LogKind.SYSTEM,
                f"Discarded {completion.kind.value} completion: {exc}",
                completion.car_id,
                completion.floor,
            )
        except Exception as exc:
            logger.exception("Failed to apply %s completion", completion.kind.value)
            self._log(
                LogKind.SYSTEM,
                f"Error applying {completion.kind.value} completion: {exc}",
                completion.car_id,
                completion.floor,
            )

    def _finish_move(self, car: Car, target: int) -> None:
        if car.movement_state is not MovementState.MOVING:
            raise InternalInconsistency(f"Car {car.car_id} is {car.movement_state.value}, expected moving")
        car.current_floor = target
        car.movement_state = MovementState.AVAILABLE
        car.last_activity = self.current_time
        self._log(LogKind.MOVEMENT, f"Car {car.car_id} arrived at floor {target}", car.car_id, target)

    def _finish_loading(self, car: Car, floor: int) -> None:
        if car.movement_state is not MovementState.LOADING:
            raise InternalInconsistency(f"Car {car.car_id} is {car.movement_state.value}, expected loading")
        destinations = self.factory.generate_destinations(floor, self.config.max_destinations)
        car.destinations |= destinations
        car.movement_state = MovementState.AVAILABLE
        car.last_activity = self.current_time
        listed = ", ".join(str(destination) for destination in sorted(destinations))
        self._log(
            LogKind.SYSTEM,
            f"Car {car.car_id} finished loading. New destinations: {listed}",
            car.car_id,
            floor,
        )

    # Control surface -----------------------------------------------------

    def toggle_simulation(self) -> bool:
        self.is_running = not self.is_running
        self._log(LogKind.SYSTEM, f"Simulation {'started' if self.is_running else 'stopped'}")
        return self.is_running

    def clear_logs(self) -> None:
        self.logs.clear()
        self._log(LogKind.SYSTEM, "System logs cleared")

    def set_dispatcher(self, name: str, **options) -> None:
        self.dispatcher = get_dispatcher(name, **options)
        self.dispatcher_name = name.lower()
        self._log(LogKind.SYSTEM, f"Dispatcher set to {name}")

    def get_state(self) -> SystemSnapshot:
        return SystemSnapshot(
            cars=tuple(car.copy() for car in self.cars),
            pending_calls=tuple(call.copy() for call in self.pending_calls),
            logs=tuple(self.logs.entries()),
            is_running=self.is_running,
            start_time=self.start_time,
            current_time=self.current_time,
            total_processed=self.total_processed,
        )

    def get_metrics(self) -> SystemMetrics:
        return SystemMetrics(
            uptime=self.current_time - self.start_time,
            total_processed=self.total_processed,
            pending_count=len(self.pending_calls),
            active_count=sum(1 for car in self.cars if car.is_busy()),
            idle_count=sum(1 for car in self.cars if car.direction is Direction.IDLE),
        )

    def is_drained(self) -> bool:
        if self.pending_calls or len(self._completions):
            return False
        return all(car.is_available() and not car.destinations for car in self.cars)

    def on_event(self, kind: str, callback: EventHook) -> None:
        """Register ``callback`` for events of ``kind`` (a ``LogKind`` value, or ``"*"``)."""
        self.event_hooks.setdefault(kind, []).append(callback)

    def _log(
        self,
        kind: LogKind,
        message: str,
        car_id: Optional[int] = None,
        floor: Optional[int] = None,
    ) -> None:
        event = self.factory.create_log_event(kind, message, car_id, floor)
        self.logs.append(event)
        logger.info("%s", event.describe())
        self._emit(event)

    def _emit(self, event: LogEvent) -> None:
        for callback in self.event_hooks.get(event.kind.value, []) + self.event_hooks.get("*", []):
            callback(event)

    def _get_car(self, car_id: int) -> Optional[Car]:
        for car in self.cars:
            if car.car_id == car_id:
                return car
        return None

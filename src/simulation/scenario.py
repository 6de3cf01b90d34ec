"""Offline scenario replay: scripted and random calls against the control loop."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from .config import SystemConfig
from .control import ElevatorControlService
from .errors import InvalidArgument


@dataclass
class ScriptedCall:
    tick: int
    floor: int
    direction: str


@dataclass
class Scenario:
    name: str
    system: SystemConfig = field(default_factory=SystemConfig)
    description: Optional[str] = None
    duration: int = 300
    calls: List[ScriptedCall] = field(default_factory=list)
    random_calls: bool = False
    drain: bool = False
    max_drain_ticks: int = 1000
    metrics_interval: int = 10

    @classmethod
    def from_dict(cls, data: Dict, default_name: str = "scenario") -> "Scenario":
        calls = [
            ScriptedCall(
                tick=call.get("tick", 0),
                floor=call["floor"],
                direction=call["direction"],
            )
            for call in data.get("calls", [])
        ]
        scenario = cls(
            name=data.get("name", default_name),
            system=SystemConfig.from_dict(data.get("system", {})),
            description=data.get("description"),
            duration=data.get("duration", 300),
            calls=calls,
            random_calls=data.get("random_calls", False),
            drain=data.get("drain", False),
            max_drain_ticks=data.get("max_drain_ticks", 1000),
            metrics_interval=max(1, data.get("metrics_interval", 10)),
        )
        if scenario.duration < 0:
            raise ValueError("Scenario duration cannot be negative")
        return scenario


def run_scenario(scenario: Scenario) -> Dict:
    service = ElevatorControlService(scenario.system)
    config = scenario.system
    random_every = max(1, round(config.random_call_interval_s / config.tick_interval_s))
    calls_by_tick: Dict[int, List[ScriptedCall]] = {}
    for call in scenario.calls:
        calls_by_tick.setdefault(call.tick, []).append(call)

    rejected: List[Dict] = []
    snapshots: List[Dict] = []
    if scenario.random_calls:
        service.toggle_simulation()

    for tick in range(scenario.duration):
        for call in calls_by_tick.get(tick, []):
            try:
                service.add_call(call.floor, call.direction)
            except InvalidArgument as exc:
                rejected.append({**asdict(call), "error": str(exc)})
        if service.is_running and tick % random_every == 0:
            if service.factory.random.random() < config.random_call_probability:
                service.generate_random_call()
        service.step()
        if (tick + 1) % scenario.metrics_interval == 0:
            snapshots.append({"tick": tick + 1, **asdict(service.get_metrics())})

    drain_ticks = 0
    if scenario.drain:
        while not service.is_drained() and drain_ticks < scenario.max_drain_ticks:
            service.step()
            drain_ticks += 1

    return {
        "scenario": scenario.name,
        "description": scenario.description,
        "duration": scenario.duration,
        "dispatcher": config.dispatcher,
        "drained": service.is_drained(),
        "drain_ticks": drain_ticks,
        "rejected_calls": rejected,
        "final_metrics": asdict(service.get_metrics()),
        "metrics_over_time": snapshots,
        "final_state": service.get_state().to_dict(),
    }

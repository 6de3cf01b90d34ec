from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Dict, Optional


@dataclass
class SystemConfig:
    """Building layout, leg timings and simulation cadence."""

    num_floors: int = 10
    car_count: int = 4
    move_duration_s: float = 10.0
    load_duration_s: float = 10.0
    max_log_entries: int = 100
    max_destinations: int = 3
    tick_interval_s: float = 1.0
    random_call_interval_s: float = 5.0
    random_call_probability: float = 0.3
    dispatcher: str = "collective"
    random_seed: Optional[int] = None

    def validate(self) -> None:
        if self.num_floors < 2:
            raise ValueError("Building must have at least two floors")
        if self.car_count < 1:
            raise ValueError("Building requires at least one car")
        if self.move_duration_s <= 0 or self.load_duration_s <= 0:
            raise ValueError("Move and load durations must be positive")
        if self.tick_interval_s <= 0 or self.random_call_interval_s <= 0:
            raise ValueError("Tick and random call intervals must be positive")
        if self.max_log_entries < 1:
            raise ValueError("Log retention must keep at least one entry")
        if self.max_destinations < 1:
            raise ValueError("Pickups must generate at least one destination")
        if not 0.0 <= self.random_call_probability <= 1.0:
            raise ValueError("Random call probability must be between 0 and 1")

    @classmethod
    def from_dict(cls, data: Dict) -> "SystemConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        cfg = cls(**data)
        cfg.validate()
        return cfg

from __future__ import annotations

from typing import Dict, Type

from .collective import CollectiveDispatcher
from .interface import Call, Car, Direction, Dispatcher, MovementState
from .nearest import NearestCarDispatcher

__all__ = [
    "Call",
    "Car",
    "CollectiveDispatcher",
    "Direction",
    "Dispatcher",
    "MovementState",
    "NearestCarDispatcher",
    "get_dispatcher",
]


DISPATCHER_REGISTRY: Dict[str, Type[Dispatcher]] = {
    "collective": CollectiveDispatcher,
    "nearest": NearestCarDispatcher,
}


def get_dispatcher(name: str, **kwargs) -> Dispatcher:
    cls = DISPATCHER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown dispatcher '{name}'. Available: {', '.join(DISPATCHER_REGISTRY)}")
    return cls(**kwargs)

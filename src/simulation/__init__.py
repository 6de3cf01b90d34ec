"""Control loop, entity factory and event log for the elevator bank."""

from .config import SystemConfig
from .control import ElevatorControlService
from .entities import LogEvent, LogKind
from .errors import IllegalDirection, InternalInconsistency, InvalidArgument, InvalidFloor
from .event_log import EventLog
from .factory import EntityFactory
from .scenario import Scenario, ScriptedCall, run_scenario
from .state import SystemMetrics, SystemSnapshot

__all__ = [
    "ElevatorControlService",
    "EntityFactory",
    "EventLog",
    "IllegalDirection",
    "InternalInconsistency",
    "InvalidArgument",
    "InvalidFloor",
    "LogEvent",
    "LogKind",
    "Scenario",
    "ScriptedCall",
    "SystemConfig",
    "SystemMetrics",
    "SystemSnapshot",
    "run_scenario",
]

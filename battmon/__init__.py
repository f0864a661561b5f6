"""battmon package for battery-monitor."""

from .state import BatteryReading, MonitorState
from .monitor import BatteryMonitor, CycleReport
from .debounce import AlertDecision, decide
from .scheduler import next_delay_seconds

__all__ = [
    "AlertDecision",
    "BatteryMonitor",
    "BatteryReading",
    "CycleReport",
    "MonitorState",
    "decide",
    "next_delay_seconds",
]

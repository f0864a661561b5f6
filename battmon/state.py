from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BatteryReading:
    """One telemetry sample: integer percent and whether external power is connected."""
    percent: int
    charging: bool


@dataclass
class MonitorState:
    """Holds mutable runtime state for the monitor.

    ``armed`` is the alert latch: it is the only field the alert decision reads.
    It starts armed, is cleared when an alert fires and is set again once the
    battery is back inside the safe band. The other fields are bookkeeping for
    status output and diagnostics."""
    armed: bool = True

    last_percent: Optional[int] = None
    last_charging: Optional[bool] = None
    last_alert: str = ""
    last_alert_ts: float = 0.0

    alerts_fired: int = 0
    cycles: int = 0
    read_failures: int = 0

from __future__ import annotations


class BatteryMonitorError(Exception):
    """Base class for errors raised by the battery monitor."""


class TelemetryReadError(BatteryMonitorError):
    """Battery percent or charging state could not be obtained or parsed."""


class NotificationError(BatteryMonitorError):
    """An alert could not be displayed."""

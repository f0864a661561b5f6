import pytest

from battmon.errors import NotificationError, TelemetryReadError


class CapturingLogger:
    """Minimal logger that matches the monitor's .emit(event, **fields) contract."""
    def __init__(self):
        self.events = []

    def emit(self, event: str, **fields):
        self.events.append((event, fields))

    def names(self):
        return [e for e, _ in self.events]


class FakeTelemetry:
    """Replays a list of (percent, charging) readings.

    Either element may be an exception instance, which is raised by the
    matching read instead."""
    def __init__(self, readings):
        self.readings = list(readings)
        self._current = None

    def read_battery_level(self):
        self._current = self.readings.pop(0)
        percent = self._current[0]
        if isinstance(percent, Exception):
            raise percent
        return percent

    def read_charging_state(self):
        charging = self._current[1]
        if isinstance(charging, Exception):
            raise charging
        return charging


class FakeNotifier:
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def show_alert(self, title, message):
        self.calls.append((title, message))
        if self.fail:
            raise NotificationError("no active session")


@pytest.fixture
def logger():
    return CapturingLogger()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def read_error():
    return TelemetryReadError("no battery percentage in pmset output")

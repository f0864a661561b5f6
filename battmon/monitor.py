from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from .constants import (
    ERROR_ALERT_MESSAGE,
    ERROR_ALERT_TITLE,
    HIGH_ALERT_MESSAGE,
    HIGH_ALERT_TITLE,
    LOW_ALERT_MESSAGE,
    LOW_ALERT_TITLE,
    MAX_INTERVAL_S,
)
from .debounce import AlertDecision, decide
from .errors import NotificationError, TelemetryReadError
from .logging import JsonLogger
from .scheduler import sleep_seconds
from .state import BatteryReading, MonitorState
from .util import now_s

ALERT_TEXT = {
    AlertDecision.FIRE_LOW: (LOW_ALERT_TITLE, LOW_ALERT_MESSAGE),
    AlertDecision.FIRE_HIGH: (HIGH_ALERT_TITLE, HIGH_ALERT_MESSAGE),
}


@dataclass
class CycleReport:
    """Outcome of one read-decide-sleep cycle.

    Recoverable problems are carried here rather than raised: a failed battery
    read (``telemetry_error``), a charging read that fell back to "not
    charging" (``charging_error``) and an alert that could not be shown
    (``notification_error``)."""
    delay_s: int
    reading: Optional[BatteryReading] = None
    decision: AlertDecision = AlertDecision.NONE
    telemetry_error: Optional[TelemetryReadError] = None
    charging_error: Optional[TelemetryReadError] = None
    notification_error: Optional[NotificationError] = None


class BatteryMonitor:
    """Battery charge monitor controller.

    Each cycle reads the battery percent and charging state, runs the alert
    latch, shows an alert if one fires and works out how long to sleep before
    the next check. Runs forever; a failed battery read only costs a
    full-interval retry."""
    def __init__(
        self,
        state: MonitorState,
        logger: JsonLogger,
        telemetry,
        notifier,
        max_interval_s: int = MAX_INTERVAL_S,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.state = state
        self.logger = logger
        self.telemetry = telemetry
        self.notifier = notifier
        self.max_interval_s = int(max_interval_s)
        self._sleep = sleep

    def _show(self, title: str, message: str) -> Optional[NotificationError]:
        try:
            self.notifier.show_alert(title, message)
        except NotificationError as e:
            return e
        return None

    def _on_read_failure(self, err: TelemetryReadError) -> CycleReport:
        self.state.read_failures += 1
        self.logger.emit("battery_read_error", error=str(err), retry_s=self.max_interval_s)
        # Best effort: a failure to show the error dialog is only logged.
        nerr = self._show(ERROR_ALERT_TITLE, ERROR_ALERT_MESSAGE)
        if nerr is not None:
            self.logger.emit("error_alert_failed", error=str(nerr))
        return CycleReport(delay_s=self.max_interval_s, telemetry_error=err, notification_error=nerr)

    def _dispatch(self, decision: AlertDecision, percent: int) -> Optional[NotificationError]:
        """Show the alert for a fire decision.

        The latch was already cleared by decide(); a display failure does not
        re-arm it, so the alert counts as fired even if the user never saw it."""
        title, template = ALERT_TEXT[decision]
        message = template.format(percent=percent)
        self.state.alerts_fired += 1
        self.state.last_alert = decision.value
        self.state.last_alert_ts = now_s()
        self.logger.emit("alert", kind=decision.value, percent=percent)
        nerr = self._show(title, message)
        if nerr is not None:
            self.logger.emit("alert_failed", kind=decision.value, error=str(nerr))
        return nerr

    def run_cycle(self) -> CycleReport:
        """Run a single cycle and return what happened. Never raises TelemetryReadError or NotificationError."""
        self.state.cycles += 1
        try:
            percent = self.telemetry.read_battery_level()
        except TelemetryReadError as e:
            return self._on_read_failure(e)

        charging_error = None
        try:
            charging = self.telemetry.read_charging_state()
        except TelemetryReadError as e:
            # Assume battery power: keeps the low alert live.
            charging = False
            charging_error = e
            self.logger.emit("charging_read_error", error=str(e), assumed_charging=False)

        reading = BatteryReading(percent=percent, charging=charging)
        self.state.last_percent = percent
        self.state.last_charging = charging

        was_armed = self.state.armed
        decision = decide(percent, charging, self.state)
        if not was_armed and self.state.armed:
            self.logger.emit("rearmed", percent=percent)

        nerr = None
        if decision is not AlertDecision.NONE:
            nerr = self._dispatch(decision, percent)

        delay = sleep_seconds(percent, self.max_interval_s)
        self.logger.emit(
            "status",
            percent=percent,
            charging=charging,
            armed=self.state.armed,
            next_check_s=delay,
        )
        return CycleReport(
            delay_s=delay,
            reading=reading,
            decision=decision,
            charging_error=charging_error,
            notification_error=nerr,
        )

    def run(self, max_cycles: Optional[int] = None):
        """Run cycles forever, or ``max_cycles`` times. Sleeps after every cycle except the last bounded one."""
        n = 0
        while max_cycles is None or n < max_cycles:
            report = self.run_cycle()
            n += 1
            if max_cycles is not None and n >= max_cycles:
                return report
            self._sleep(report.delay_s)

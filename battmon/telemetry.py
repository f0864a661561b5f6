from __future__ import annotations

import re
import shutil
import subprocess
from typing import Optional

import psutil

from .errors import TelemetryReadError
from .util import round_half_away

_PERCENT_RE = re.compile(r"(\d+)%")
_SOURCE_RE = re.compile(r"Now drawing from '([^']+)'")

POWER_SOURCES = {
    "AC Power": True,
    "Battery Power": False,
}


def parse_pmset_percent(output: str) -> int:
    """Parse the charge percent out of ``pmset -g batt`` output.

    Output looks like::

        Now drawing from 'Battery Power'
         -InternalBattery-0 (id=1234567)	85%; discharging; 2:30 remaining present: true
    """
    match = _PERCENT_RE.search(output or "")
    if not match:
        raise TelemetryReadError("no battery percentage in pmset output")
    percent = int(match.group(1))
    if not 0 <= percent <= 100:
        raise TelemetryReadError(f"battery percentage out of range: {percent}")
    return percent


def parse_pmset_power_source(output: str) -> bool:
    """Map the power source reported by ``pmset -g batt`` to a charging flag."""
    match = _SOURCE_RE.search(output or "")
    if not match:
        raise TelemetryReadError("no power source in pmset output")
    source = match.group(1)
    if source not in POWER_SOURCES:
        raise TelemetryReadError(f"unrecognized power source: {source!r}")
    return POWER_SOURCES[source]


class BatteryTelemetry:
    """Reads battery percent and charging state from the host.

    psutil's native sensor API is tried first. When it has nothing to offer
    (no sensor support, no battery, unknown plug state) and ``pmset`` exists,
    its text report is parsed instead. Every failure surfaces as
    TelemetryReadError."""
    def __init__(self, use_psutil: bool = True, pmset_path: Optional[str] = None):
        self.use_psutil = use_psutil
        self._pmset_path = pmset_path

    def _sensor(self):
        if not self.use_psutil:
            return None
        sensors_battery = getattr(psutil, "sensors_battery", None)
        if sensors_battery is None:
            return None
        try:
            return sensors_battery()
        except (NotImplementedError, OSError, RuntimeError):
            return None

    def _pmset(self) -> str:
        path = self._pmset_path or shutil.which("pmset")
        if not path:
            raise TelemetryReadError("no battery sensor available and pmset not found")
        try:
            result = subprocess.run([path, "-g", "batt"], capture_output=True, text=True)
        except OSError as e:
            raise TelemetryReadError(f"pmset failed: {e}") from e
        if result.returncode != 0:
            raise TelemetryReadError(f"pmset failed with status {result.returncode}")
        return result.stdout

    def read_battery_level(self) -> int:
        """Return the battery charge as an integer percent in 0..100."""
        batt = self._sensor()
        if batt is not None and batt.percent is not None:
            try:
                percent = round_half_away(*float(batt.percent).as_integer_ratio())
            except (TypeError, ValueError, OverflowError) as e:
                raise TelemetryReadError(f"bad battery percentage: {batt.percent!r}") from e
            if not 0 <= percent <= 100:
                raise TelemetryReadError(f"battery percentage out of range: {percent}")
            return percent
        return parse_pmset_percent(self._pmset())

    def read_charging_state(self) -> bool:
        """Return True on external (AC) power, False on battery power."""
        batt = self._sensor()
        if batt is not None and batt.power_plugged is not None:
            return bool(batt.power_plugged)
        return parse_pmset_power_source(self._pmset())

from __future__ import annotations

import enum

from .constants import HIGH_THRESHOLD, LOW_THRESHOLD
from .state import MonitorState


class AlertDecision(enum.Enum):
    NONE = "none"
    FIRE_LOW = "low"
    FIRE_HIGH = "high"


def in_safe_band(battery_percent: int) -> bool:
    """True when the percent is strictly between the low and high thresholds."""
    return LOW_THRESHOLD < battery_percent < HIGH_THRESHOLD


def decide(battery_percent: int, is_charging: bool, state: MonitorState) -> AlertDecision:
    """Decide whether a threshold alert should fire, updating ``state.armed``.

    The latch fires at most once per excursion past a threshold and re-arms only
    when the reading is back inside the safe band, so a battery pinned at 20%
    (unplugged) or 80% (on a tapering charger) does not re-alert every poll.
    A low alert is suppressed while charging and a high alert while
    discharging.

    Exactly 20% while charging, or exactly 80% while not charging, neither
    re-arms nor fires.
    """
    if not state.armed and in_safe_band(battery_percent):
        state.armed = True

    if state.armed and not is_charging and battery_percent <= LOW_THRESHOLD:
        state.armed = False
        return AlertDecision.FIRE_LOW

    if state.armed and is_charging and battery_percent >= HIGH_THRESHOLD:
        state.armed = False
        return AlertDecision.FIRE_HIGH

    return AlertDecision.NONE

from __future__ import annotations

from .constants import HIGH_THRESHOLD, LOW_THRESHOLD, MAX_INTERVAL_S, MIN_INTERVAL_S
from .util import round_half_away

_MIDPOINT = (LOW_THRESHOLD + HIGH_THRESHOLD) // 2
_HALF_BAND_SQ = (_MIDPOINT - LOW_THRESHOLD) ** 2


def next_delay_seconds(battery_percent: int, max_interval_s: int = MAX_INTERVAL_S) -> int:
    """Return how long to wait before the next battery check.

    The delay follows the parabola through (20, 60), (50, max_interval_s) and
    (80, 60)::

        a = (60 - max) / 900
        b = (max - 60) / 9
        c = 4/9 * (375 - 4 * max)
        y = a*x^2 + b*x + c

    so checks are frequent near the thresholds and rare around 50%. It is
    evaluated in its vertex form ``max + (60 - max) * (x - 50)^2 / 900`` with
    integer arithmetic, which keeps it exactly symmetric about 50, and rounded
    half away from zero.

    No clamping is applied: outside roughly 19..81% the result is negative for
    the default maximum. Callers that sleep on it use ``sleep_seconds``.
    """
    d_sq = (int(battery_percent) - _MIDPOINT) ** 2
    max_interval_s = int(max_interval_s)
    numerator = _HALF_BAND_SQ * max_interval_s + (MIN_INTERVAL_S - max_interval_s) * d_sq
    return round_half_away(numerator, _HALF_BAND_SQ)


def sleep_seconds(battery_percent: int, max_interval_s: int = MAX_INTERVAL_S) -> int:
    """Delay actually slept: ``next_delay_seconds`` floored at MIN_INTERVAL_S."""
    return max(next_delay_seconds(battery_percent, max_interval_s), MIN_INTERVAL_S)

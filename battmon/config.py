from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from .constants import MAX_INTERVAL_S, MIN_INTERVAL_S


@dataclass
class MonitorConfig:
    max_interval_s: int = MAX_INTERVAL_S
    json: bool = False
    banner: bool = True
    once: bool = False
    pushover_token: Optional[str] = None
    pushover_user: Optional[str] = None

    @property
    def pushover_enabled(self) -> bool:
        return bool(self.pushover_token and self.pushover_user)

    def as_dict(self) -> dict:
        d = asdict(self)
        # Never echo credentials into logs.
        d["pushover_token"] = "***" if self.pushover_token else None
        d["pushover_user"] = "***" if self.pushover_user else None
        return d


def config_from_args(args) -> MonitorConfig:
    """Build a MonitorConfig from a parsed argparse namespace."""
    max_interval = getattr(args, "max_interval", None)
    if max_interval is None:
        max_interval = MAX_INTERVAL_S
    if max_interval < MIN_INTERVAL_S:
        raise ValueError(f"--max-interval must be at least {MIN_INTERVAL_S} seconds")
    return MonitorConfig(
        max_interval_s=int(max_interval),
        json=bool(getattr(args, "json", False)),
        banner=not getattr(args, "no_banner", False),
        once=bool(getattr(args, "once", False)),
        pushover_token=getattr(args, "pushover_token", None) or None,
        pushover_user=getattr(args, "pushover_user", None) or None,
    )

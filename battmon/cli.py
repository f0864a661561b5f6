from __future__ import annotations

import sys

from .config import config_from_args
from .constants import VERSION
from .doctor import build_arg_parser, run_doctor
from .logging import JsonLogger
from .monitor import BatteryMonitor
from .notify import CompositeNotifier, DialogNotifier, PushoverNotifier
from .state import MonitorState
from .telemetry import BatteryTelemetry


def main(argv=None):
    """CLI entry point. Parses args, builds the monitor and runs it until interrupted."""
    ap = build_arg_parser()
    args = ap.parse_args(argv)

    try:
        cfg = config_from_args(args)
    except ValueError as e:
        ap.error(str(e))

    telemetry = BatteryTelemetry()
    dialog = DialogNotifier()

    if args.doctor:
        return run_doctor(telemetry, dialog, max_interval_s=cfg.max_interval_s)

    copies = []
    if cfg.pushover_enabled:
        copies.append(PushoverNotifier(True, cfg.pushover_token, cfg.pushover_user))
    notifier = CompositeNotifier(dialog, copies)

    logger = JsonLogger(enable_json=cfg.json)
    mon = BatteryMonitor(
        state=MonitorState(),
        logger=logger,
        telemetry=telemetry,
        notifier=notifier,
        max_interval_s=cfg.max_interval_s,
    )

    if cfg.banner:
        print(f"battery-monitor {VERSION}")
        print("Keeping the battery between 20% and 80%")
        logger.emit("startup", version=VERSION, **cfg.as_dict())

    try:
        mon.run(max_cycles=1 if cfg.once else None)
    except KeyboardInterrupt:
        logger.emit("shutdown", cycles=mon.state.cycles, alerts=mon.state.alerts_fired)
    return 0


if __name__ == "__main__":
    sys.exit(main())

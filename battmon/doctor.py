from __future__ import annotations

import argparse
import shutil
import sys
from argparse import RawDescriptionHelpFormatter

import psutil

from .constants import MAX_INTERVAL_S, USAGE_EXAMPLES, VERSION
from .errors import TelemetryReadError
from .notify import DialogNotifier
from .scheduler import sleep_seconds
from .telemetry import BatteryTelemetry


def run_doctor(telemetry: BatteryTelemetry, notifier: DialogNotifier, max_interval_s: int = MAX_INTERVAL_S, out=None) -> int:
    """Run host checks (battery sensor, pmset, dialog tool) and print diagnostics.

    Read-only: no dialog is shown. Returns 0 when the monitor can read the
    battery level, 1 otherwise."""
    out = out or sys.stdout

    def say(line=""):
        print(line, file=out)

    say("Doctor Mode (safe):")
    say("  - No dialog is shown.")
    say()

    has_sensor = getattr(psutil, "sensors_battery", None) is not None
    say(f"  psutil {psutil.__version__}: battery sensor API {'available' if has_sensor else 'missing'}")
    pmset = shutil.which("pmset")
    say(f"  pmset: {pmset or 'not found'}")
    if notifier.available():
        say("  OK: dialog tool found")
    else:
        say("  WARN: no dialog tool (osascript/zenity); alerts will only be logged")

    rc = 0
    try:
        percent = telemetry.read_battery_level()
        say(f"  OK: battery level {percent}% (next check in {sleep_seconds(percent, max_interval_s)}s)")
    except TelemetryReadError as e:
        say(f"  FAIL: battery level unreadable: {e}")
        rc = 1
    try:
        charging = telemetry.read_charging_state()
        say(f"  OK: charging={charging}")
    except TelemetryReadError as e:
        say(f"  WARN: charging state unreadable ({e}); the monitor will assume not charging")
    return rc


def build_arg_parser():
    """Construct the CLI argument parser. Every flag is optional."""
    ap = argparse.ArgumentParser(
        prog="battery-monitor",
        description="Keep a laptop battery between 20% and 80% with one-shot alerts.",
        epilog=USAGE_EXAMPLES,
        formatter_class=RawDescriptionHelpFormatter,
    )
    ap.add_argument("--max-interval", type=int, default=MAX_INTERVAL_S,
                    help=f"Longest wait between checks in seconds, used around 50%% (default: {MAX_INTERVAL_S}).")
    json_group = ap.add_mutually_exclusive_group()
    json_group.add_argument("--json", dest="json", action="store_true", help="Emit JSON log events.")
    json_group.add_argument("--no-json", dest="json", action="store_false", help="Disable JSON log output.")
    ap.add_argument("--no-banner", dest="no_banner", action="store_true", help="Disable the startup banner.")
    ap.add_argument("--banner", dest="no_banner", action="store_false", help="Enable the startup banner.")
    ap.add_argument("--once", action="store_true", help="Run a single check and exit.")
    ap.add_argument("--doctor", action="store_true", help="Run host diagnostics (battery sensor, dialog tool) and exit.")
    ap.add_argument("--pushover-token", help="Pushover application token; with --pushover-user, alerts are also pushed. "
                         "Command-line values are visible to other users in ps output.")
    ap.add_argument("--pushover-user", help="Pushover user key.")
    ap.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    ap.set_defaults(json=False, no_banner=False)
    return ap

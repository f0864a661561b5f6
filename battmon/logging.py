from __future__ import annotations

import json
import sys
import time
from typing import Optional, TextIO

# Events routed to stderr instead of stdout.
ERROR_EVENTS = frozenset({
    "battery_read_error",
    "charging_read_error",
    "alert_failed",
    "error_alert_failed",
})


class JsonLogger:
    """Minimal structured logger.

    Emits one line per event (startup, status, alerts, read failures) so logs
    are easy to grep and, with ``enable_json``, machine-parse. Error events go
    to stderr, everything else to stdout."""
    def __init__(self, enable_json: bool, stream: Optional[TextIO] = None, err_stream: Optional[TextIO] = None):
        """Create a logger.

        Args:
            enable_json: Emit JSON objects instead of ``[ts] event k=v`` lines.
            stream: Output for normal events (defaults to stdout).
            err_stream: Output for error events (defaults to stderr).
        """
        self.enable_json = enable_json
        self._stream = stream
        self._err_stream = err_stream

    def _target(self, event: str) -> TextIO:
        if event in ERROR_EVENTS:
            return self._err_stream or sys.stderr
        return self._stream or sys.stdout

    def emit(self, event: str, **fields):
        """Emit an event with a name and optional key/value fields."""
        t = time.time()
        # ts: float seconds since epoch. ts_iso is a local timestamp with milliseconds.
        ts_iso = time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(t)) + f'.{int((t - int(t))*1000):03d}'
        out = self._target(event)
        if self.enable_json:
            payload = {"ts": t, "ts_iso": ts_iso, "event": event, **fields}
            print(json.dumps(payload, sort_keys=True), file=out, flush=True)
        else:
            msg = f"[{ts_iso}] {event}"
            if fields:
                msg += " " + " ".join(f"{k}={v}" for k, v in fields.items())
            print(msg, file=out, flush=True)

from __future__ import annotations

import shutil
import subprocess
import sys
import threading
from typing import Optional, Sequence

import requests

from .constants import PUSHOVER_URL
from .errors import NotificationError


def _applescript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


# Exit codes that mean the user dismissed the dialog, per tool. zenity returns 1
# when the window is closed or Esc is pressed instead of clicking OK.
ACKNOWLEDGED_CODES = {
    "osascript": frozenset({0}),
    "zenity": frozenset({0, 1}),
}


def dialog_command(title: str, message: str, platform: Optional[str] = None) -> Optional[list]:
    """Build the argv that shows a modal single-button dialog, or None if unsupported."""
    platform = platform or sys.platform
    if platform == "darwin":
        if not shutil.which("osascript"):
            return None
        script = (
            f"display dialog {_applescript_quote(message)} with title {_applescript_quote(title)} "
            'buttons {"OK"} default button "OK"'
        )
        return ["osascript", "-e", script]
    if shutil.which("zenity"):
        return ["zenity", "--info", "--modal", f"--title={title}", f"--text={message}"]
    return None


class DialogNotifier:
    """Shows alerts as a modal dialog the user has to acknowledge.

    The call blocks until the dialog is dismissed."""
    def __init__(self, platform: Optional[str] = None):
        self.platform = platform

    def available(self) -> bool:
        return dialog_command("", "", self.platform) is not None

    def show_alert(self, title: str, message: str):
        cmd = dialog_command(title, message, self.platform)
        if cmd is None:
            raise NotificationError("no dialog tool available (need osascript or zenity)")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise NotificationError(f"{cmd[0]} failed: {e}") from e
        if result.returncode not in ACKNOWLEDGED_CODES.get(cmd[0], frozenset({0})):
            detail = (result.stderr or "").strip()
            raise NotificationError(f"{cmd[0]} exited with status {result.returncode}" + (f": {detail}" if detail else ""))


class PushoverNotifier:
    """Fire-and-forget copy of alerts to the Pushover API. Never raises."""
    def __init__(self, enabled: bool, pushover_token: Optional[str], pushover_user: Optional[str], timeout_s: float = 5.0):
        self.enabled = enabled and bool(pushover_token and pushover_user)
        self._token = pushover_token
        self._user = pushover_user
        self._timeout = timeout_s

    def show_alert(self, title: str, message: str, priority: int = 0):
        if not self.enabled:
            return
        threading.Thread(target=self._send_sync, args=(title, message, priority), daemon=True).start()

    def _send_sync(self, title: str, message: str, priority: int):
        try:
            requests.post(
                PUSHOVER_URL,
                data={
                    "token": self._token,
                    "user": self._user,
                    "title": title,
                    "message": message,
                    "priority": priority,
                },
                timeout=self._timeout,
            )
        except requests.RequestException:
            pass


class CompositeNotifier:
    """Hands copies of the alert to the others, then shows it on the primary notifier.

    Copies go out first: the primary is usually a modal dialog that blocks
    until someone dismisses it. Only the primary's NotificationError propagates."""
    def __init__(self, primary, copies: Sequence = ()):
        self.primary = primary
        self.copies = list(copies)

    def show_alert(self, title: str, message: str):
        for n in self.copies:
            n.show_alert(title, message)
        self.primary.show_alert(title, message)

import subprocess

import pytest
import requests

from battmon.errors import NotificationError
from battmon.notify import CompositeNotifier, DialogNotifier, PushoverNotifier, dialog_command

from conftest import FakeNotifier


def test_macos_dialog_command(monkeypatch):
    monkeypatch.setattr("battmon.notify.shutil.which", lambda name: "/usr/bin/" + name)
    cmd = dialog_command("Battery Low", 'Battery is at 20%. "Please" charge it.', platform="darwin")
    assert cmd[:2] == ["osascript", "-e"]
    assert cmd[2] == (
        'display dialog "Battery is at 20%. \\"Please\\" charge it." with title "Battery Low" '
        'buttons {"OK"} default button "OK"'
    )


def test_linux_dialog_command_uses_zenity(monkeypatch):
    monkeypatch.setattr("battmon.notify.shutil.which", lambda name: "/usr/bin/zenity" if name == "zenity" else None)
    cmd = dialog_command("Battery High", "Battery is at 80%.", platform="linux")
    assert cmd == ["zenity", "--info", "--modal", "--title=Battery High", "--text=Battery is at 80%."]


def test_no_dialog_tool(monkeypatch):
    monkeypatch.setattr("battmon.notify.shutil.which", lambda name: None)
    n = DialogNotifier(platform="linux")
    assert n.available() is False
    with pytest.raises(NotificationError):
        n.show_alert("t", "m")


def test_dialog_failure_raises_notification_error(monkeypatch):
    monkeypatch.setattr("battmon.notify.shutil.which", lambda name: "/usr/bin/" + name)
    monkeypatch.setattr(
        "battmon.notify.subprocess.run",
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, 1, stdout="", stderr="No user interaction allowed."),
    )
    with pytest.raises(NotificationError, match="No user interaction allowed"):
        DialogNotifier(platform="darwin").show_alert("t", "m")


def test_dialog_success(monkeypatch):
    calls = []

    def run(cmd, **kw):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="button returned:OK\n", stderr="")

    monkeypatch.setattr("battmon.notify.shutil.which", lambda name: "/usr/bin/" + name)
    monkeypatch.setattr("battmon.notify.subprocess.run", run)
    DialogNotifier(platform="darwin").show_alert("t", "m")
    assert calls and calls[0][0] == "osascript"


def test_pushover_never_raises(monkeypatch):
    def boom(*a, **k):
        raise requests.ConnectionError("fail")

    monkeypatch.setattr("requests.post", boom)

    n = PushoverNotifier(enabled=True, pushover_token="t", pushover_user="u")

    # Call the sync path to deterministically exercise exception handling.
    n._send_sync("t", "m", 1)


def test_pushover_payload(monkeypatch):
    posted = []
    monkeypatch.setattr("requests.post", lambda url, data, timeout: posted.append((url, data, timeout)))

    n = PushoverNotifier(enabled=True, pushover_token="tok", pushover_user="usr", timeout_s=3.0)
    n._send_sync("Battery Low", "Battery is at 20%. Please charge it.", 0)

    url, data, timeout = posted[0]
    assert url == "https://api.pushover.net/1/messages.json"
    assert data["token"] == "tok" and data["user"] == "usr"
    assert data["title"] == "Battery Low"
    assert timeout == 3.0


def test_pushover_disabled_without_credentials():
    assert PushoverNotifier(enabled=True, pushover_token=None, pushover_user="u").enabled is False


def test_composite_sends_copies_even_when_dialog_fails():
    primary = FakeNotifier(fail=True)
    copy = FakeNotifier()
    n = CompositeNotifier(primary, [copy])

    with pytest.raises(NotificationError):
        n.show_alert("Battery High", "Battery is at 80%. Consider unplugging.")
    assert copy.calls == [("Battery High", "Battery is at 80%. Consider unplugging.")]


class _RecordingDialog(FakeNotifier):
    """Primary that records whether the copy had already gone out when it opened."""
    def __init__(self, copy, fail=False):
        super().__init__(fail=fail)
        self.copy = copy
        self.copy_sent_while_open = None

    def show_alert(self, title, message):
        self.copy_sent_while_open = bool(self.copy.calls)
        super().show_alert(title, message)


@pytest.mark.parametrize("fail", [False, True])
def test_composite_sends_copies_before_blocking_dialog(fail):
    copy = FakeNotifier()
    dialog = _RecordingDialog(copy, fail=fail)
    n = CompositeNotifier(dialog, [copy])

    if fail:
        with pytest.raises(NotificationError):
            n.show_alert("Battery Low", "Battery is at 20%. Please charge it.")
    else:
        n.show_alert("Battery Low", "Battery is at 20%. Please charge it.")

    assert dialog.copy_sent_while_open is True
    assert len(dialog.calls) == 1


def _fake_dialog_exit(monkeypatch, returncode):
    monkeypatch.setattr("battmon.notify.shutil.which", lambda name: "/usr/bin/" + name)
    monkeypatch.setattr(
        "battmon.notify.subprocess.run",
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, returncode, stdout="", stderr=""),
    )


def test_zenity_window_close_counts_as_acknowledged(monkeypatch):
    _fake_dialog_exit(monkeypatch, 1)
    DialogNotifier(platform="linux").show_alert("Battery Low", "Battery is at 20%. Please charge it.")


def test_zenity_error_exit_still_fails(monkeypatch):
    _fake_dialog_exit(monkeypatch, 255)
    with pytest.raises(NotificationError, match="status 255"):
        DialogNotifier(platform="linux").show_alert("t", "m")


def test_osascript_exit_1_is_a_failure(monkeypatch):
    _fake_dialog_exit(monkeypatch, 1)
    with pytest.raises(NotificationError):
        DialogNotifier(platform="darwin").show_alert("t", "m")

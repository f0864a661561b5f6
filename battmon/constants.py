from __future__ import annotations

VERSION = "1.0.0"

LOW_THRESHOLD = 20
HIGH_THRESHOLD = 80

# Poll cadence at the thresholds, and the floor applied to any computed sleep.
MIN_INTERVAL_S = 60
# Longest poll interval, reached at 50%.
MAX_INTERVAL_S = 20 * 60

LOW_ALERT_TITLE = "Battery Low"
LOW_ALERT_MESSAGE = "Battery is at {percent}%. Please charge it."
HIGH_ALERT_TITLE = "Battery High"
HIGH_ALERT_MESSAGE = "Battery is at {percent}%. Consider unplugging."
ERROR_ALERT_TITLE = "Battery monitor error"
ERROR_ALERT_MESSAGE = "Error reading battery level"

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"


USAGE_EXAMPLES = """\
Usage examples:
  # Run normally (checks forever, alerts at 20% and 80%)
  battery-monitor

  # Poll at most every 10 minutes, log JSON events
  battery-monitor --max-interval 600 --json

  # Also push alerts to a phone via Pushover
  battery-monitor --pushover-token APP_TOKEN --pushover-user USER_KEY

  # Single check, then exit
  battery-monitor --once

  # Host diagnostic (does not show any dialog)
  battery-monitor --doctor
"""

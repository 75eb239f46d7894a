"""
config.py — reads all settings from tracker_settings.yaml and exposes them
as the constants that the rest of the application uses.

You should NOT need to edit this file.
Edit tracker_settings.yaml instead (or point TRACKER_SETTINGS at another file).
"""

import os
import sys

import yaml

# ── Load tracker_settings.yaml ────────────────────────────────────────────────

_HERE = os.path.dirname(os.path.abspath(__file__))
_SETTINGS_FILE = os.environ.get(
    "TRACKER_SETTINGS", os.path.join(_HERE, "tracker_settings.yaml")
)

if not os.path.exists(_SETTINGS_FILE):
    print(
        "ERROR: tracker settings file not found.\n"
        f"Expected it at: {_SETTINGS_FILE}\n"
        "Please make sure the file exists and try again."
    )
    sys.exit(1)

with open(_SETTINGS_FILE, encoding="utf-8") as _f:
    _p = yaml.safe_load(_f) or {}

# ── Aggregation ───────────────────────────────────────────────────────────────

TOP_WINNERS_LIMIT = int(_p.get("top_winners", 10))

# ── Parsing ───────────────────────────────────────────────────────────────────

TWO_DIGIT_YEAR_PIVOT = int(_p.get("two_digit_year_pivot", 70))

# ── Output ────────────────────────────────────────────────────────────────────

OUTPUT_DIR      = str(_p.get("output_dir", "reports"))
OUTPUT_FILENAME = "bidding_tracker_{date}.xlsx"
LOG_FILE        = _p.get("log_file") or ""

# ── Dashboard ─────────────────────────────────────────────────────────────────

_web = _p.get("web", {}) or {}

WEB_HOST = str(_web.get("host", "127.0.0.1"))
WEB_PORT = int(_web.get("port", 5001))

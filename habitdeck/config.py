"""Configuration: loads environment variables with sensible defaults.

All tunables live here. Override via .env file or environment variables.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

def _env(key: str, default: str = "") -> str:
    return os.getenv(key, default)

def _env_int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


# ═══════════════════════════════════════════════════════════════════════════
# Storage
# ═══════════════════════════════════════════════════════════════════════════
# The whole habit collection is written as one JSON blob under STORE_KEY.

DB_PATH = Path(_env("HABITDECK_DB_PATH") or _PROJECT_ROOT / "data" / "habitdeck.db")
STORE_KEY = _env("HABITDECK_STORE_KEY", "habitsData")

# ═══════════════════════════════════════════════════════════════════════════
# Habits
# ═══════════════════════════════════════════════════════════════════════════

DEFAULT_WEEKLY_TARGET = _env_int("DEFAULT_WEEKLY_TARGET", 3)
HISTORY_DAYS = _env_int("HISTORY_DAYS", 14)

# ═══════════════════════════════════════════════════════════════════════════
# Logging
# ═══════════════════════════════════════════════════════════════════════════

LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()

# ═══════════════════════════════════════════════════════════════════════════
# Timezone (default UTC, override for your locale in .env)
# ═══════════════════════════════════════════════════════════════════════════
# "Today" for streaks and default toggles is the calendar date in this offset.

TIMEZONE_OFFSET_HOURS = _env_int("TIMEZONE_OFFSET_HOURS", 0)

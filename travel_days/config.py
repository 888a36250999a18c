"""Configuration: .env loading, paths, constants."""

import os
from pathlib import Path
from dotenv import load_dotenv

# Project root = parent of travel_days/
PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default)).strip()
    try:
        return float(raw)
    except ValueError:
        return default


# --- Storage ---
REDIS_URL = os.getenv("REDIS_URL", "")  # empty = local file only
REDIS_SOCKET_TIMEOUT_SECONDS = _env_float("REDIS_SOCKET_TIMEOUT_SECONDS", 2.0)
TRACKER_KEY_PREFIX = os.getenv("TRACKER_KEY_PREFIX", "country-tracker")
LOCAL_STORE_PATH = Path(os.getenv("LOCAL_STORE_PATH", str(PROJECT_ROOT / "trips_store.json")))
ACTIVITY_LOG_LIMIT = _env_int("ACTIVITY_LOG_LIMIT", 100)
ADMIN_DELETE_PASSWORD = os.getenv("ADMIN_DELETE_PASSWORD") or None

# --- Travelers ---
DEFAULT_TRAVELER = os.getenv("DEFAULT_TRAVELER", "Person 1")  # also used to migrate old records

# --- Residency ---
RESIDENCY_THRESHOLD_DAYS = _env_int("RESIDENCY_THRESHOLD_DAYS", 183)
WARNING_MARGIN_DAYS = _env_int("WARNING_MARGIN_DAYS", 33)  # APPROACHING from 150 days

# --- Paths ---
OUTPUT_DIR = PROJECT_ROOT / "output"

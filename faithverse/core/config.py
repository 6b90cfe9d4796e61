"""
Configuration constants for the progress engine.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).resolve().parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        print(f"[CONFIG] Ignoring invalid {name}={raw!r}, using {default}", flush=True)
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"[CONFIG] Ignoring invalid {name}={raw!r}, using {default}", flush=True)
        return default


# XP needed per level. Level is always xp // XP_PER_LEVEL + 1.
XP_PER_LEVEL = 100

# XP granted per point of score, per game module: xp = floor(score * rate)
MODULE_XP_RATES = {
    "quiz": _float_env("XP_RATE_QUIZ", 1.0),
    "memory": _float_env("XP_RATE_MEMORY", 0.5),
    "story": _float_env("XP_RATE_STORY", 1.0),
    "adventure": _float_env("XP_RATE_ADVENTURE", 1.0),
}

# Consecutive quiz days needed to complete the "quiz_streak" daily challenge
QUIZ_STREAK_TARGET = _int_env("QUIZ_STREAK_TARGET", 3)

# Transfer document version written by export, major version checked on import
SCHEMA_VERSION = "1.0"

# IANA zone name used for day boundaries. Empty means the runtime's local time.
FAITHVERSE_TIMEZONE = os.getenv("FAITHVERSE_TIMEZONE", "").strip()

# Optional cloud sync endpoint. Sync is best-effort and never required.
CLOUD_SYNC_URL = os.getenv("CLOUD_SYNC_URL", "").strip()
CLOUD_SYNC_TIMEOUT = _float_env("CLOUD_SYNC_TIMEOUT", 10.0)

ENABLE_DEBUG_ROUTES = os.getenv("ENABLE_DEBUG_ROUTES", "0") == "1"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

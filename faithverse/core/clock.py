"""
Single source of "now" and "today" for the engine.

Day boundaries follow the runtime's local calendar day, or the IANA zone in
FAITHVERSE_TIMEZONE when set. Every component asks its clock once per call so
a single operation never straddles two days.
"""
from datetime import date, datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from faithverse.core.config import FAITHVERSE_TIMEZONE
from faithverse.core.logging import get_logger

logger = get_logger(__name__)


def _load_zone(name: str) -> Optional[ZoneInfo]:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"[CONFIG] Ignoring unsupported timezone {name!r}, using local time")
        return None


class Clock:
    """Reads the system time in the engine's timezone."""

    def __init__(self, tz_name: str = FAITHVERSE_TIMEZONE):
        self.tz = _load_zone(tz_name)

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now().astimezone()
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()

    def start_of_next_day(self, day: date | None = None) -> datetime:
        tomorrow = (day or self.today()) + timedelta(days=1)
        midnight = datetime.combine(tomorrow, time())
        if self.tz is None:
            # astimezone() picks the local offset in effect at that midnight
            return midnight.astimezone()
        return midnight.replace(tzinfo=self.tz)


class FixedClock(Clock):
    """Clock pinned to a given instant. Used by tests and scripts."""

    def __init__(self, instant: datetime):
        self._instant = instant if instant.tzinfo else instant.astimezone()
        self.tz = self._instant.tzinfo

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = instant if instant.tzinfo else instant.astimezone()
        self.tz = self._instant.tzinfo

    def advance(self, **delta) -> None:
        self._instant = self._instant + timedelta(**delta)


def day_stamp(day: date) -> str:
    """YYYY-MM-DD stamp stored on daily records."""
    return day.isoformat()

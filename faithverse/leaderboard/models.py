from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from faithverse.storage.records import Record


class SortKey(str, Enum):
    XP = "xp"
    TOTAL_SCORE = "totalScore"
    LEVEL = "level"


class LeaderboardEntry(Record):
    rank: int
    id: str
    username: str
    display_name: str
    avatar: Optional[str] = None
    xp: int
    level: int
    total_score: int
    joined_at: datetime
    is_current_user: bool = False


class LeaderboardView(Record):
    """A ranking computed on request from the profile store. Never stored."""
    kind: Literal["live"] = "live"
    sort_key: SortKey
    generated_at: datetime
    entries: list[LeaderboardEntry]

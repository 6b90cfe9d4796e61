from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from faithverse.scores.models import ModuleType
from faithverse.storage.records import Record


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    DIVINE = "divine"


class Rarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class Badge(Record):
    id: str
    name: str = ""
    rarity: Rarity = Rarity.COMMON
    unlocked_at: datetime


class Preferences(Record):
    theme: Theme = Theme.LIGHT
    sound_enabled: bool = True
    music_volume: float = Field(0.7, ge=0, le=1)
    sfx_volume: float = Field(0.8, ge=0, le=1)


class ProfileStats(Record):
    verses_memorized: int = Field(0, ge=0)
    quizzes_completed: int = Field(0, ge=0)
    stories_finished: int = Field(0, ge=0)
    perfect_scores: int = Field(0, ge=0)
    streak_days: int = Field(0, ge=0)


def empty_play_counts() -> dict[str, int]:
    return {m.value: 0 for m in ModuleType}


class Profile(Record):
    """
    Identity plus progression summary.

    level is derived: level == xp // XP_PER_LEVEL + 1, and only
    ProfileStore.apply_xp changes either value.
    """
    id: str
    username: str = Field(..., min_length=1)
    display_name: str
    avatar: Optional[str] = None
    email: Optional[str] = None

    level: int = Field(1, ge=1)
    xp: int = Field(0, ge=0)
    total_score: int = Field(0, ge=0)
    games_played: dict[str, int] = Field(default_factory=empty_play_counts)

    achievements: list[str] = Field(default_factory=list)
    badges: list[Badge] = Field(default_factory=list)
    preferences: Preferences = Field(default_factory=Preferences)
    stats: ProfileStats = Field(default_factory=ProfileStats)

    joined_at: datetime
    last_active: datetime


class ProfileCreate(Record):
    """Onboarding payload."""
    username: str = Field(..., min_length=1, max_length=64)
    display_name: Optional[str] = None
    avatar: Optional[str] = None
    email: Optional[str] = None
    preferences: Preferences = Field(default_factory=Preferences)


class SignIn(Record):
    username: str = Field(..., min_length=1)

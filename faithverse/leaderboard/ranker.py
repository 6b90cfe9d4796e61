"""
Leaderboard ranking, derived from the profile store on every call.
"""
from typing import Optional

from faithverse.core.clock import Clock
from faithverse.leaderboard.models import LeaderboardEntry, LeaderboardView, SortKey
from faithverse.profiles.models import Profile
from faithverse.profiles.service import ProfileStore

_SORT_FIELDS = {
    SortKey.XP: "xp",
    SortKey.TOTAL_SCORE: "total_score",
    SortKey.LEVEL: "level",
}


class LeaderboardRanker:
    def __init__(self, profiles: ProfileStore, clock: Clock):
        self.profiles = profiles
        self.clock = clock

    def rank(self, sort_key: SortKey = SortKey.XP, limit: Optional[int] = None) -> LeaderboardView:
        """Descending by sort_key; ties keep profile store order (sorted is stable under reverse)."""
        field = _SORT_FIELDS[sort_key]
        current_id = self.profiles.current_id()
        ordered = sorted(self.profiles.list_all(), key=lambda p: getattr(p, field), reverse=True)
        entries = [self._entry(p, position, current_id) for position, p in enumerate(ordered, start=1)]
        if limit is not None:
            entries = entries[:limit]
        return LeaderboardView(sort_key=sort_key, generated_at=self.clock.now(), entries=entries)

    def position(self, profile_id: str, sort_key: SortKey = SortKey.XP) -> Optional[LeaderboardEntry]:
        return next((e for e in self.rank(sort_key).entries if e.id == profile_id), None)

    @staticmethod
    def _entry(profile: Profile, rank: int, current_id: Optional[str]) -> LeaderboardEntry:
        return LeaderboardEntry(
            rank=rank,
            id=profile.id,
            username=profile.username,
            display_name=profile.display_name,
            avatar=profile.avatar,
            xp=profile.xp,
            level=profile.level,
            total_score=profile.total_score,
            joined_at=profile.joined_at,
            is_current_user=profile.id == current_id,
        )

"""
Quiz streak per profile, independent of the daily challenge set.

Rules:
  - a passed quiz counts once per calendar day
  - passing again after a missed day starts a new run at 1
  - a failed quiz always breaks the streak, folding it into longest
"""
from datetime import date, timedelta

from faithverse.core.clock import Clock
from faithverse.core.logging import get_logger
from faithverse.daily.models import QuizStreak
from faithverse.storage.adapter import KeyValueStore
from faithverse.storage.records import load_record, save_record

logger = get_logger(__name__)

STREAK_KEY_PREFIX = "faithverse_quiz_streak_"


def streak_key(profile_id: str) -> str:
    return f"{STREAK_KEY_PREFIX}{profile_id}"


class QuizStreakTracker:
    def __init__(self, store: KeyValueStore, clock: Clock):
        self.store = store
        self.clock = clock

    def get(self, profile_id: str) -> QuizStreak:
        return load_record(self.store, streak_key(profile_id), QuizStreak) or QuizStreak()

    def record_completion(self, profile_id: str, passed: bool, today: date | None = None) -> QuizStreak:
        streak = self.get(profile_id)
        today = today or self.clock.today()

        if passed:
            if streak.last_quiz_date != today:
                current = streak.current
                longest = streak.longest
                if streak.last_quiz_date is not None and streak.last_quiz_date < today - timedelta(days=1):
                    # Missed at least one day: the old run ends here
                    longest = max(longest, current)
                    current = 0
                streak = streak.model_copy(update={
                    "current": current + 1,
                    "longest": longest,
                    "last_quiz_date": today,
                    "completed": True,
                })
            else:
                streak = streak.model_copy(update={"completed": True})
        else:
            streak = streak.model_copy(update={
                "longest": max(streak.longest, streak.current),
                "current": 0,
                "completed": False,
            })

        save_record(self.store, streak_key(profile_id), streak)
        logger.info(f"[STREAK] profile={profile_id} passed={passed} "
                    f"current={streak.current} longest={streak.longest}")
        return streak

    def purge(self, profile_id: str) -> None:
        self.store.remove(streak_key(profile_id))

"""
Daily challenge set per (profile, calendar day).

State per day: Stale -> Active -> Expired, and Expired is Stale again the
next day. Every read or write first brings the stored set to today; a set
from an earlier day is superseded by a fresh copy of the catalog, never
merged.
"""
from datetime import date, datetime

from faithverse.core.clock import Clock, day_stamp
from faithverse.core.config import QUIZ_STREAK_TARGET
from faithverse.core.exceptions import StaleState
from faithverse.core.logging import get_logger
from faithverse.daily.models import (
    ChallengeType, DailyChallenge, DailyChallengeSet, QuizCompletionResult,
)
from faithverse.daily.streak import QuizStreakTracker
from faithverse.storage.adapter import KeyValueStore
from faithverse.storage.records import load_record, save_record

logger = get_logger(__name__)

CHALLENGES_KEY_PREFIX = "faithverse_daily_challenges_"

DAILY_VERSE_CHALLENGE = "daily_verse"
QUIZ_STREAK_CHALLENGE = "quiz_streak"

# Fixed catalog; regeneration always starts from these definitions.
CHALLENGE_CATALOG = [
    {
        "id": DAILY_VERSE_CHALLENGE,
        "title": "Daily Bible Verse",
        "description": "Memorize today's featured verse",
        "type": ChallengeType.DAILY_VERSE,
    },
    {
        "id": QUIZ_STREAK_CHALLENGE,
        "title": "Quiz Streak",
        "description": f"Complete {QUIZ_STREAK_TARGET} quizzes in a row",
        "type": ChallengeType.QUIZ_STREAK,
        "target": QUIZ_STREAK_TARGET,
        "current": 0,
    },
]


def challenges_key(profile_id: str) -> str:
    return f"{CHALLENGES_KEY_PREFIX}{profile_id}"


def build_challenge_set(profile_id: str, today: date, expires_at: datetime) -> DailyChallengeSet:
    stamp = day_stamp(today)
    challenges = [
        DailyChallenge(**definition, completed=False, last_updated=stamp, expires_at=expires_at)
        for definition in CHALLENGE_CATALOG
    ]
    return DailyChallengeSet(profile_id=profile_id, day=stamp, challenges=challenges)


class DailyScheduler:
    def __init__(self, store: KeyValueStore, clock: Clock, streaks: QuizStreakTracker):
        self.store = store
        self.clock = clock
        self.streaks = streaks

    def _check_fresh(self, stored: DailyChallengeSet, today: date) -> None:
        if stored.day != day_stamp(today):
            raise StaleState(stored.profile_id, stored.day, day_stamp(today))

    def get_today(self, profile_id: str, today: date | None = None) -> DailyChallengeSet:
        """Today's set, regenerating it first if the stored one is from another day."""
        today = today or self.clock.today()
        stored = load_record(self.store, challenges_key(profile_id), DailyChallengeSet)
        if stored is not None:
            try:
                self._check_fresh(stored, today)
                return stored
            except StaleState as exc:
                logger.info(f"[DAILY] {exc.message}; regenerating")

        fresh = build_challenge_set(profile_id, today, self.clock.start_of_next_day(today))
        save_record(self.store, challenges_key(profile_id), fresh)
        return fresh

    def update_challenge(
        self,
        profile_id: str,
        challenge_id: str,
        completed: bool,
        current: int | None = None,
        today: date | None = None,
    ) -> DailyChallengeSet:
        """Set progress on one of today's challenges. Unknown ids are ignored."""
        challenge_set = self.get_today(profile_id, today)
        challenge = challenge_set.find(challenge_id)
        if challenge is None:
            logger.info(f"[DAILY] profile={profile_id} unknown challenge '{challenge_id}', ignoring")
            return challenge_set

        changes = {"completed": completed, "last_updated": challenge_set.day}
        if current is not None:
            changes["current"] = current
        updated = challenge.model_copy(update=changes)

        challenges = [updated if c.id == challenge_id else c for c in challenge_set.challenges]
        challenge_set = challenge_set.model_copy(update={"challenges": challenges})
        save_record(self.store, challenges_key(profile_id), challenge_set)
        logger.info(f"[DAILY] profile={profile_id} challenge='{challenge_id}' "
                    f"completed={completed} current={updated.current}")
        return challenge_set

    def record_quiz_completion(self, profile_id: str, passed: bool) -> QuizCompletionResult:
        today = self.clock.today()
        streak = self.streaks.record_completion(profile_id, passed, today)

        challenge_set = self.get_today(profile_id, today)
        challenge = challenge_set.find(QUIZ_STREAK_CHALLENGE)
        if challenge is not None:
            target = challenge.target or QUIZ_STREAK_TARGET
            if streak.current >= target:
                challenge_set = self.update_challenge(
                    profile_id, QUIZ_STREAK_CHALLENGE, True, current=streak.current, today=today)
            elif not challenge.completed:
                # Progress only; a completion earned earlier today sticks
                challenge_set = self.update_challenge(
                    profile_id, QUIZ_STREAK_CHALLENGE, False, current=streak.current, today=today)

        return QuizCompletionResult(streak=streak, challenges=challenge_set)

    def purge(self, profile_id: str) -> None:
        self.store.remove(challenges_key(profile_id))
        self.streaks.purge(profile_id)

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from faithverse.storage.records import Record


class ChallengeType(str, Enum):
    DAILY_VERSE = "daily_verse"
    QUIZ_STREAK = "quiz_streak"


class DailyChallenge(Record):
    id: str
    title: str
    description: str = ""
    type: ChallengeType
    completed: bool = False
    target: Optional[int] = None
    current: Optional[int] = None
    last_updated: str = Field(..., description="Day stamp YYYY-MM-DD")
    expires_at: datetime


class DailyChallengeSet(Record):
    """All of one profile's objectives for one calendar day."""
    profile_id: str
    day: str = Field(..., description="Day stamp YYYY-MM-DD")
    challenges: list[DailyChallenge] = Field(default_factory=list)

    def find(self, challenge_id: str) -> Optional[DailyChallenge]:
        return next((c for c in self.challenges if c.id == challenge_id), None)


class QuizStreak(Record):
    current: int = Field(0, ge=0)
    longest: int = Field(0, ge=0)
    last_quiz_date: Optional[date] = None
    # True when the most recent quiz today was passed
    completed: bool = False


class QuizCompletionResult(Record):
    streak: QuizStreak
    challenges: DailyChallengeSet


class DailyVerse(Record):
    id: str
    verse: str
    reference: str
    date: str = Field(..., description="Day stamp YYYY-MM-DD")
    completed: bool = False
    memorized: bool = False


class ChallengeUpdate(Record):
    completed: bool
    current: Optional[int] = Field(None, ge=0)


class QuizCompletion(Record):
    passed: bool


class VerseUpdate(Record):
    completed: bool = True
    memorized: bool = False

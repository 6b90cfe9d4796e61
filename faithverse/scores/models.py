from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field

from faithverse.storage.records import Record


class ModuleType(str, Enum):
    QUIZ = "quiz"
    MEMORY = "memory"
    STORY = "story"
    ADVENTURE = "adventure"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ScoreEvent(Record):
    """One completed play session. Never edited once appended."""
    model_config = ConfigDict(frozen=True)

    id: str
    profile_id: str
    module_type: ModuleType
    score: int
    xp_granted: int
    completed_at: datetime
    difficulty: Optional[Difficulty] = None
    character: Optional[str] = None
    chapter: Optional[int] = None


class ScoreContext(Record):
    """Optional details a game module attaches to a completion."""
    difficulty: Optional[Difficulty] = None
    character: Optional[str] = None
    chapter: Optional[int] = Field(None, ge=1)
    # Highest score possible in the session; reaching it counts as a perfect score
    max_score: Optional[int] = Field(None, ge=1)


class ScoreCreate(ScoreContext):
    profile_id: str
    module_type: ModuleType
    score: int = Field(..., ge=0)


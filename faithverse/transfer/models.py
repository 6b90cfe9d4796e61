from datetime import datetime
from typing import Optional

from pydantic import Field

from faithverse.profiles.models import Profile
from faithverse.scores.models import ScoreEvent
from faithverse.stories.models import StoryProgress
from faithverse.storage.records import Record


class TransferDocument(Record):
    """Portable copy of one profile and everything scoped to it."""
    schema_version: str
    exported_at: Optional[datetime] = None
    profile: Profile
    score_events: list[ScoreEvent] = Field(default_factory=list)
    story_progress: list[StoryProgress] = Field(default_factory=list)


class ImportResult(Record):
    profile: Profile
    previous_id: str
    score_events: int = 0
    story_progress: int = 0

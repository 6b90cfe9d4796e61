from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from faithverse.storage.records import Record


class StoryProgress(Record):
    """Resumable playthrough of one character's story for one profile."""
    id: str
    profile_id: str
    character: str = Field(..., min_length=1)
    current_chapter: int = Field(1, ge=1)
    completed_chapters: list[int] = Field(default_factory=list)
    total_score: int = 0
    faith: int = Field(0, ge=0)
    courage: int = Field(0, ge=0)
    obedience: int = Field(0, ge=0)
    completed: bool = False
    last_played: Optional[datetime] = None


class StoryChoice(Record):
    """
    The choice a player made at the end of the current chapter.

    next_chapter comes from the caller's narrative graph; leave it unset to
    move to current + 1. ending=True marks a branch with no successor.
    """
    score: int = 0
    faith: int = 0
    courage: int = 0
    obedience: int = 0
    next_chapter: Optional[int] = Field(None, ge=1)
    ending: bool = False

    @model_validator(mode="after")
    def _ending_has_no_successor(self):
        if self.ending and self.next_chapter is not None:
            raise ValueError("an ending choice cannot name a next chapter")
        return self

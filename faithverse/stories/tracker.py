"""
Story progress per (profile, character).

The narrative graph lives with the game module: each choice arrives with its
own successor chapter or an ending flag, and this tracker only records where
the player stands.
"""
import uuid
from typing import Iterable, Optional

from faithverse.core.clock import Clock
from faithverse.core.exceptions import BlankCharacter, NotFound
from faithverse.core.logging import get_logger
from faithverse.profiles.service import ProfileStore
from faithverse.stories.models import StoryChoice, StoryProgress
from faithverse.storage.adapter import KeyValueStore
from faithverse.storage.records import load_records, save_records

logger = get_logger(__name__)

STORY_PROGRESS_KEY = "faithverse_story_progress"


def new_progress_id() -> str:
    return f"progress_{uuid.uuid4().hex}"


def _normalize_character(character: str) -> str:
    normalized = character.strip().lower()
    if not normalized:
        raise BlankCharacter()
    return normalized


class StoryTracker:
    def __init__(self, store: KeyValueStore, clock: Clock, profiles: ProfileStore):
        self.store = store
        self.clock = clock
        self.profiles = profiles

    def _load(self) -> list[StoryProgress]:
        return load_records(self.store, STORY_PROGRESS_KEY, StoryProgress)

    def _save(self, records: list[StoryProgress]) -> None:
        save_records(self.store, STORY_PROGRESS_KEY, records)

    def load(self, profile_id: str, character: str) -> Optional[StoryProgress]:
        character = _normalize_character(character)
        return next(
            (p for p in self._load() if p.profile_id == profile_id and p.character == character),
            None,
        )

    def resume(self, profile_id: str, character: str) -> StoryProgress:
        """Existing progress, or a fresh chapter-1 record (not persisted yet)."""
        existing = self.load(profile_id, character)
        if existing is not None:
            return existing
        return StoryProgress(
            id=new_progress_id(),
            profile_id=profile_id,
            character=_normalize_character(character),
        )

    def all_for(self, profile_id: str) -> list[StoryProgress]:
        return [p for p in self._load() if p.profile_id == profile_id]

    def apply_choice(self, profile_id: str, character: str, choice: StoryChoice) -> StoryProgress:
        if self.profiles.get(profile_id) is None:
            raise NotFound("Profile", profile_id)

        progress = self.resume(profile_id, character)
        played = progress.current_chapter

        completed_chapters = list(progress.completed_chapters)
        if played not in completed_chapters:
            completed_chapters.append(played)

        if choice.ending:
            current_chapter = played
        else:
            requested = choice.next_chapter if choice.next_chapter is not None else played + 1
            floor = max(completed_chapters) + 1
            if requested < floor:
                logger.warning(f"[STORY] profile={profile_id} character='{progress.character}' "
                               f"next chapter {requested} is behind completed chapters, using {floor}")
            current_chapter = max(requested, floor)

        updated = progress.model_copy(update={
            "current_chapter": current_chapter,
            "completed_chapters": completed_chapters,
            "total_score": progress.total_score + choice.score,
            "faith": max(0, progress.faith + choice.faith),
            "courage": max(0, progress.courage + choice.courage),
            "obedience": max(0, progress.obedience + choice.obedience),
            "completed": choice.ending,
            "last_played": self.clock.now(),
        })
        self._put(updated)

        if choice.ending:
            logger.info(f"[STORY] profile={profile_id} finished '{updated.character}' "
                        f"score={updated.total_score}")
        return updated

    def restart(self, profile_id: str, character: str) -> StoryProgress:
        """Explicit reset back to chapter 1 with every counter cleared."""
        if self.profiles.get(profile_id) is None:
            raise NotFound("Profile", profile_id)
        existing = self.load(profile_id, character)
        fresh = StoryProgress(
            id=existing.id if existing else new_progress_id(),
            profile_id=profile_id,
            character=_normalize_character(character),
            last_played=self.clock.now(),
        )
        self._put(fresh)
        logger.info(f"[STORY] profile={profile_id} restarted '{fresh.character}'")
        return fresh

    def append_imported(self, records: Iterable[StoryProgress]) -> int:
        incoming = list(records)
        if incoming:
            self._save([*self._load(), *incoming])
        return len(incoming)

    def purge(self, profile_id: str) -> None:
        records = self._load()
        kept = [p for p in records if p.profile_id != profile_id]
        if len(kept) != len(records):
            self._save(kept)

    def _put(self, progress: StoryProgress) -> None:
        records = [
            p for p in self._load()
            if not (p.profile_id == progress.profile_id and p.character == progress.character)
        ]
        records.append(progress)
        self._save(records)

"""
Score ledger: append-only log of completed play sessions.

record() is the one call that writes two entities: it appends the event and
then grants XP on the owning profile. The writes are sequential; if the
profile is gone the event stays in the log as an orphan and is reported, not
retried.
"""
import math
import uuid
from typing import Iterable, Iterator, Optional

from faithverse.core.clock import Clock
from faithverse.core.config import MODULE_XP_RATES
from faithverse.core.exceptions import NotFound
from faithverse.core.logging import get_logger
from faithverse.profiles.models import Profile
from faithverse.profiles.service import ProfileStore
from faithverse.scores.models import ModuleType, ScoreContext, ScoreEvent
from faithverse.storage.adapter import KeyValueStore
from faithverse.storage.records import Record, load_records, save_records

logger = get_logger(__name__)

SCORES_KEY = "faithverse_scores"


class RecordResult(Record):
    event: ScoreEvent
    # None when the owning profile was missing and the event is orphaned
    profile: Optional[Profile] = None
    leveled_up: bool = False

    @property
    def orphaned(self) -> bool:
        return self.profile is None


def xp_for_score(module_type: ModuleType, score: int) -> int:
    return math.floor(score * MODULE_XP_RATES.get(module_type.value, 1.0))


def new_score_id() -> str:
    return f"score_{uuid.uuid4().hex}"


class ScoreHistory:
    """Events for one profile in insertion order. Re-reads the store on every pass."""

    def __init__(self, ledger: "ScoreLedger", profile_id: str):
        self._ledger = ledger
        self.profile_id = profile_id

    def __iter__(self) -> Iterator[ScoreEvent]:
        for event in self._ledger._load():
            if event.profile_id == self.profile_id:
                yield event


class ScoreLedger:
    def __init__(self, store: KeyValueStore, clock: Clock, profiles: ProfileStore):
        self.store = store
        self.clock = clock
        self.profiles = profiles

    def _load(self) -> list[ScoreEvent]:
        return load_records(self.store, SCORES_KEY, ScoreEvent)

    def record(
        self,
        profile_id: str,
        module_type: ModuleType,
        score: int,
        context: Optional[ScoreContext] = None,
    ) -> RecordResult:
        context = context or ScoreContext()
        event = ScoreEvent(
            id=new_score_id(),
            profile_id=profile_id,
            module_type=module_type,
            score=score,
            xp_granted=xp_for_score(module_type, score),
            completed_at=self.clock.now(),
            difficulty=context.difficulty,
            character=context.character,
            chapter=context.chapter,
        )

        events = self._load()
        events.append(event)
        save_records(self.store, SCORES_KEY, events)

        try:
            before = self.profiles.get(profile_id)
            profile = self.profiles.apply_xp(profile_id, event.xp_granted)
            profile = self.profiles.increment_play_count(profile_id, module_type, score)
            if module_type == ModuleType.QUIZ:
                profile = self.profiles.record_stat(profile_id, "quizzes_completed")
            if context.max_score is not None and score >= context.max_score:
                profile = self.profiles.record_stat(profile_id, "perfect_scores")
        except NotFound:
            logger.warning(f"[SCORE] orphaned event id={event.id}: profile {profile_id} not found")
            return RecordResult(event=event)

        leveled_up = before is not None and profile.level > before.level
        logger.info(f"[SCORE] profile={profile_id} module={module_type.value} score={score} "
                    f"xp=+{event.xp_granted} total_xp={profile.xp} level={profile.level}")
        return RecordResult(event=event, profile=profile, leveled_up=leveled_up)

    def best_score(self, profile_id: str, module_type: ModuleType) -> Optional[ScoreEvent]:
        """Highest score; ties go to the earliest completion, then to the earlier entry."""
        best = None
        for event in self.all_for(profile_id):
            if event.module_type != module_type:
                continue
            if (
                best is None
                or event.score > best.score
                or (event.score == best.score and event.completed_at < best.completed_at)
            ):
                best = event
        return best

    def all_for(self, profile_id: str) -> ScoreHistory:
        return ScoreHistory(self, profile_id)

    def append_imported(self, events: Iterable[ScoreEvent]) -> int:
        incoming = list(events)
        if incoming:
            save_records(self.store, SCORES_KEY, [*self._load(), *incoming])
        return len(incoming)

    def purge(self, profile_id: str) -> None:
        events = self._load()
        kept = [e for e in events if e.profile_id != profile_id]
        if len(kept) != len(events):
            save_records(self.store, SCORES_KEY, kept)
            logger.info(f"[SCORE] purged {len(events) - len(kept)} events for profile={profile_id}")

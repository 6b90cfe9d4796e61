"""
Export/import of a profile with its score events and story progress.

Import is additive and never reuses incoming ids: the profile gets a fresh id
and every dependent record is rebound to it. Usernames stay unique, so a
document whose username already exists locally is rejected.
"""
import json
from typing import Any, Union

from pydantic import ValidationError

from faithverse.core.clock import Clock
from faithverse.core.config import SCHEMA_VERSION
from faithverse.core.exceptions import MalformedDocument, NotFound
from faithverse.core.logging import get_logger
from faithverse.profiles.service import ProfileStore, level_for_xp, new_profile_id
from faithverse.scores.ledger import ScoreLedger, new_score_id
from faithverse.stories.tracker import StoryTracker, new_progress_id
from faithverse.transfer.models import ImportResult, TransferDocument

logger = get_logger(__name__)


def _major(version: str) -> str:
    return version.split(".", 1)[0].strip()


def parse_document(document: Union[str, bytes, dict]) -> TransferDocument:
    """Validate raw import input, raising MalformedDocument with a readable reason."""
    if isinstance(document, (str, bytes, bytearray)):
        try:
            data: Any = json.loads(document)
        except ValueError as exc:
            raise MalformedDocument("Import failed: the file is not valid JSON.") from exc
    else:
        data = document

    if not isinstance(data, dict):
        raise MalformedDocument("Import failed: expected a JSON object at the top level.")
    if not isinstance(data.get("profile"), dict):
        raise MalformedDocument("Import failed: the document has no profile.")

    for field in ("scoreEvents", "storyProgress"):
        if field in data and not isinstance(data[field], list):
            raise MalformedDocument(f"Import failed: '{field}' must be a list.")

    version = str(data.get("schemaVersion") or SCHEMA_VERSION)
    if _major(version) != _major(SCHEMA_VERSION):
        raise MalformedDocument(f"Import failed: unsupported schema version {version}.")

    try:
        return TransferDocument.model_validate({**data, "schemaVersion": version})
    except ValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first["loc"])
        raise MalformedDocument(f"Import failed: invalid field '{where}' ({first['msg']}).") from exc


class TransferService:
    def __init__(self, clock: Clock, profiles: ProfileStore, ledger: ScoreLedger, stories: StoryTracker):
        self.clock = clock
        self.profiles = profiles
        self.ledger = ledger
        self.stories = stories

    def export_profile(self, profile_id: str) -> TransferDocument:
        profile = self.profiles.get(profile_id)
        if profile is None:
            raise NotFound("Profile", profile_id)
        return TransferDocument(
            schema_version=SCHEMA_VERSION,
            exported_at=self.clock.now(),
            profile=profile,
            score_events=list(self.ledger.all_for(profile_id)),
            story_progress=self.stories.all_for(profile_id),
        )

    def export_json(self, profile_id: str) -> str:
        return self.export_profile(profile_id).model_dump_json(by_alias=True, indent=2)

    def import_document(self, document: Union[str, bytes, dict]) -> ImportResult:
        doc = parse_document(document)
        previous_id = doc.profile.id
        profile_id = new_profile_id()

        profile = doc.profile.model_copy(update={
            "id": profile_id,
            "level": level_for_xp(doc.profile.xp),
        })
        self.profiles.add_existing(profile)

        events = [
            e.model_copy(update={"id": new_score_id(), "profile_id": profile_id})
            for e in doc.score_events
        ]
        stories = [
            s.model_copy(update={"id": new_progress_id(), "profile_id": profile_id})
            for s in doc.story_progress
        ]
        self.ledger.append_imported(events)
        self.stories.append_imported(stories)

        logger.info(f"[TRANSFER] imported profile '{profile.username}' {previous_id} -> {profile_id} "
                    f"events={len(events)} stories={len(stories)}")
        return ImportResult(
            profile=profile,
            previous_id=previous_id,
            score_events=len(events),
            story_progress=len(stories),
        )

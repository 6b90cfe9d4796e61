import json

import pytest

from faithverse.core.container import ProgressEngine
from faithverse.core.exceptions import DuplicateUsername, MalformedDocument
from faithverse.scores.models import ModuleType
from faithverse.storage.adapter import MemoryKeyValueStore
from faithverse.stories.models import StoryChoice


@pytest.fixture
def exported(engine, alice):
    engine.scores.record(alice.id, ModuleType.QUIZ, 120)
    engine.scores.record(alice.id, ModuleType.MEMORY, 40)
    engine.stories.apply_choice(alice.id, "daniel", StoryChoice(score=5, courage=2))
    return engine.transfer.export_json(alice.id)


def test_export_uses_camel_case(exported):
    doc = json.loads(exported)
    assert doc["schemaVersion"] == "1.0"
    assert doc["profile"]["username"] == "alice"
    assert len(doc["scoreEvents"]) == 2
    assert doc["storyProgress"][0]["currentChapter"] == 2


def test_import_into_fresh_store(engine, exported, clock, alice):
    other = ProgressEngine(MemoryKeyValueStore(), clock)

    result = other.transfer.import_document(exported)

    assert result.previous_id == alice.id
    assert result.profile.id != alice.id
    assert (result.score_events, result.story_progress) == (2, 1)

    profile = other.profiles.find_by_username("alice")
    assert (profile.xp, profile.level) == (140, 2)
    assert [e.score for e in other.scores.all_for(profile.id)] == [120, 40]
    assert other.stories.load(profile.id, "daniel").courage == 2


    # everything but the ids survives the round trip
    original = engine.profiles.get(alice.id)
    assert result.profile.model_dump(exclude={"id"}) == original.model_dump(exclude={"id"})

    def strip_ids(records):
        return [r.model_dump(exclude={"id", "profile_id"}) for r in records]

    assert strip_ids(other.scores.all_for(profile.id)) == strip_ids(engine.scores.all_for(alice.id))
    assert strip_ids(other.stories.all_for(profile.id)) == strip_ids(engine.stories.all_for(alice.id))


def test_import_rederives_level(exported, clock):
    doc = json.loads(exported)
    doc["profile"]["level"] = 42
    other = ProgressEngine(MemoryKeyValueStore(), clock)

    assert other.transfer.import_document(doc).profile.level == 2


def test_import_rejects_taken_username(engine, exported):
    with pytest.raises(DuplicateUsername):
        engine.transfer.import_document(exported)
    assert len(engine.profiles.list_all()) == 1


@pytest.mark.parametrize("document", [
    "not json at all",
    "[1, 2, 3]",
    {"scoreEvents": []},
    {"schemaVersion": "2.0", "profile": {}},
    {"profile": {"username": "x"}},
])
def test_malformed_documents(engine, document):
    with pytest.raises(MalformedDocument):
        engine.transfer.import_document(document)


def test_lists_must_be_lists(exported, clock):
    doc = json.loads(exported)
    doc["scoreEvents"] = {"oops": True}
    other = ProgressEngine(MemoryKeyValueStore(), clock)

    with pytest.raises(MalformedDocument) as exc:
        other.transfer.import_document(doc)
    assert "scoreEvents" in exc.value.message
    assert other.profiles.list_all() == []


def test_timestamps_without_zone_are_read_as_utc(exported, clock):
    doc = json.loads(exported)
    doc["profile"]["joinedAt"] = doc["profile"]["joinedAt"][:19]
    for event in doc["scoreEvents"]:
        event["completedAt"] = event["completedAt"][:19]
    other = ProgressEngine(MemoryKeyValueStore(), clock)

    profile = other.transfer.import_document(doc).profile
    assert profile.joined_at.tzinfo is not None

    clock.advance(hours=1)
    other.scores.record(profile.id, ModuleType.QUIZ, 120)

    # tie with the imported event: the earlier (imported) one wins
    best = other.scores.best_score(profile.id, ModuleType.QUIZ)
    imported = next(iter(other.scores.all_for(profile.id)))
    assert best.id == imported.id
    assert best.completed_at.tzinfo is not None

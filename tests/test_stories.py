import pytest
from pydantic import ValidationError

from faithverse.core.exceptions import BlankCharacter, NotFound
from faithverse.stories.models import StoryChoice


def test_resume_returns_fresh_unsaved_progress(engine, alice):
    progress = engine.stories.resume(alice.id, "David")
    assert progress.current_chapter == 1
    assert progress.character == "david"
    assert engine.stories.load(alice.id, "david") is None


def test_choices_advance_and_accumulate(engine, alice):
    engine.stories.apply_choice(alice.id, "moses", StoryChoice(score=10, faith=2, courage=1))
    progress = engine.stories.apply_choice(alice.id, " Moses ", StoryChoice(score=5, faith=1, obedience=-3))

    assert progress.current_chapter == 3
    assert progress.completed_chapters == [1, 2]
    assert progress.total_score == 15
    assert (progress.faith, progress.courage, progress.obedience) == (3, 1, 0)
    assert len(engine.stories.all_for(alice.id)) == 1


def test_branch_behind_completed_chapters_is_clamped(engine, alice):
    engine.stories.apply_choice(alice.id, "ruth", StoryChoice(next_chapter=4))
    progress = engine.stories.apply_choice(alice.id, "ruth", StoryChoice(next_chapter=2))

    assert progress.completed_chapters == [1, 4]
    assert progress.current_chapter == 5


def test_ending_completes_story(engine, alice):
    engine.stories.apply_choice(alice.id, "esther", StoryChoice(score=3))
    progress = engine.stories.apply_choice(alice.id, "esther", StoryChoice(score=7, ending=True))

    assert progress.completed is True
    assert progress.current_chapter == 2
    assert progress.completed_chapters == [1, 2]


def test_restart_clears_progress(engine, alice):
    first = engine.stories.apply_choice(alice.id, "noah", StoryChoice(score=20, faith=4))
    fresh = engine.stories.restart(alice.id, "noah")

    assert fresh.id == first.id
    assert (fresh.current_chapter, fresh.total_score, fresh.faith) == (1, 0, 0)
    assert fresh.completed_chapters == []


def test_unknown_profile_is_rejected(engine):
    with pytest.raises(NotFound):
        engine.stories.apply_choice("user_missing", "moses", StoryChoice())


def test_ending_cannot_name_next_chapter():
    with pytest.raises(ValidationError):
        StoryChoice(ending=True, next_chapter=3)


def test_blank_character_is_rejected(engine, alice):
    with pytest.raises(BlankCharacter):
        engine.stories.apply_choice(alice.id, "   ", StoryChoice(score=1))
    with pytest.raises(BlankCharacter):
        engine.stories.resume(alice.id, "")
    with pytest.raises(BlankCharacter):
        engine.stories.restart(alice.id, " ")
    assert engine.stories.all_for(alice.id) == []

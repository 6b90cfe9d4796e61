from faithverse.profiles.models import ProfileCreate
from faithverse.scores.ledger import xp_for_score
from faithverse.scores.models import Difficulty, ModuleType, ScoreContext


def test_xp_accumulates_and_levels_up(engine, alice):
    first = engine.scores.record(alice.id, ModuleType.QUIZ, 80)
    assert first.event.xp_granted == 80
    assert (first.profile.xp, first.profile.level) == (80, 1)
    assert first.leveled_up is False

    second = engine.scores.record(alice.id, ModuleType.QUIZ, 30)
    assert (second.profile.xp, second.profile.level) == (110, 2)
    assert second.leveled_up is True


def test_module_rates_floor_the_xp():
    assert xp_for_score(ModuleType.MEMORY, 45) == 22
    assert xp_for_score(ModuleType.STORY, 7) == 7


def test_play_counts_total_score_and_quiz_stat(engine, alice):
    engine.scores.record(alice.id, ModuleType.QUIZ, 40)
    engine.scores.record(alice.id, ModuleType.MEMORY, 90)
    engine.scores.record(alice.id, ModuleType.QUIZ, 10)

    profile = engine.profiles.get(alice.id)
    assert profile.games_played["quiz"] == 2
    assert profile.games_played["memory"] == 1
    assert profile.total_score == 90
    assert profile.stats.quizzes_completed == 2


def test_perfect_score_needs_max_score(engine, alice):
    engine.scores.record(alice.id, ModuleType.QUIZ, 10)
    engine.scores.record(alice.id, ModuleType.QUIZ, 10, ScoreContext(max_score=10, difficulty=Difficulty.HARD))

    assert engine.profiles.get(alice.id).stats.perfect_scores == 1
    events = list(engine.scores.all_for(alice.id))
    assert events[1].difficulty == Difficulty.HARD


def test_best_score_ties_go_to_earliest(engine, clock, alice):
    early = engine.scores.record(alice.id, ModuleType.MEMORY, 50).event
    clock.advance(minutes=5)
    engine.scores.record(alice.id, ModuleType.MEMORY, 50)
    engine.scores.record(alice.id, ModuleType.QUIZ, 99)

    assert engine.scores.best_score(alice.id, ModuleType.MEMORY).id == early.id

    clock.advance(minutes=5)
    better = engine.scores.record(alice.id, ModuleType.MEMORY, 51).event
    assert engine.scores.best_score(alice.id, ModuleType.MEMORY).id == better.id
    assert engine.scores.best_score(alice.id, ModuleType.ADVENTURE) is None


def test_history_is_scoped_and_restartable(engine, alice):
    bob = engine.profiles.create(ProfileCreate(username="bob"))
    engine.scores.record(alice.id, ModuleType.QUIZ, 1)
    engine.scores.record(bob.id, ModuleType.QUIZ, 2)

    history = engine.scores.all_for(alice.id)
    assert [e.score for e in history] == [1]

    engine.scores.record(alice.id, ModuleType.STORY, 3)
    # a second pass re-reads the store
    assert [e.score for e in history] == [1, 3]


def test_orphaned_event_is_kept_and_reported(engine):
    result = engine.scores.record("user_missing", ModuleType.QUIZ, 40)

    assert result.orphaned
    assert result.profile is None
    assert [e.id for e in engine.scores.all_for("user_missing")] == [result.event.id]

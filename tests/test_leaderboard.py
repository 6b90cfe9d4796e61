from faithverse.leaderboard.models import SortKey
from faithverse.profiles.models import ProfileCreate
from faithverse.scores.models import ModuleType


def _seed(engine, xps):
    profiles = []
    for index, xp in enumerate(xps):
        profile = engine.profiles.create(ProfileCreate(username=f"player{index}"))
        engine.profiles.apply_xp(profile.id, xp)
        profiles.append(profile)
    return profiles


def test_ranks_by_xp_with_stable_ties(engine):
    a, b, c, d = _seed(engine, [50, 200, 200, 10])

    view = engine.leaderboard.rank()

    assert view.kind == "live"
    assert [e.id for e in view.entries] == [b.id, c.id, a.id, d.id]
    assert [e.rank for e in view.entries] == [1, 2, 3, 4]
    # the last created profile is the signed-in one
    assert [e.is_current_user for e in view.entries] == [False, False, False, True]


def test_limit_and_other_sort_keys(engine):
    _seed(engine, [50, 200, 200, 10])
    engine.scores.record(engine.profiles.find_by_username("player3").id, ModuleType.QUIZ, 500)

    top = engine.leaderboard.rank(SortKey.TOTAL_SCORE, limit=1)
    assert [e.username for e in top.entries] == ["player3"]

    by_level = engine.leaderboard.rank(SortKey.LEVEL)
    assert by_level.entries[0].username == "player3"
    assert by_level.entries[0].level == 6


def test_position_lookup(engine):
    a, b, _, _ = _seed(engine, [50, 200, 200, 10])
    assert engine.leaderboard.position(a.id).rank == 3
    assert engine.leaderboard.position("user_missing") is None


def test_empty_store_has_no_entries(engine):
    assert engine.leaderboard.rank().entries == []

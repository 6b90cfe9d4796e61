"""
Achievement system.
Awards: first_game, level_5, streak_7, perfect_score, story_finished, verse_memorized
Each awarded at most once per profile; some also grant a badge.
"""
from faithverse.profiles.models import Profile, Rarity
from faithverse.profiles.service import ProfileStore

# Achievement definitions for display
ACHIEVEMENTS = {
    "first_game":      {"icon": "🏆", "label": "First Steps",       "desc": "Completed your first game"},
    "level_5":         {"icon": "⭐", "label": "Level 5 Reached",   "desc": "Reached level 5"},
    "streak_7":        {"icon": "🔥", "label": "7-Day Streak",      "desc": "Passed a quiz 7 days in a row"},
    "perfect_score":   {"icon": "💯", "label": "Perfect Score",     "desc": "Finished a game without a miss"},
    "story_finished":  {"icon": "📖", "label": "Story Complete",    "desc": "Reached the end of a character's story"},
    "verse_memorized": {"icon": "📜", "label": "Verse Keeper",      "desc": "Memorized a daily verse"},
}

# Achievements that also hand out a badge
BADGES = {
    "level_5":         ("Rising Disciple", Rarity.RARE),
    "streak_7":        ("Faithful Week", Rarity.EPIC),
    "perfect_score":   ("Flawless", Rarity.RARE),
    "story_finished":  ("Storyteller", Rarity.COMMON),
}


def _award(profiles: ProfileStore, profile_id: str, key: str) -> bool:
    """Try to award an achievement. Returns True if newly awarded, False if already had."""
    if not profiles.unlock_achievement(profile_id, key):
        return False
    if key in BADGES:
        name, rarity = BADGES[key]
        profiles.award_badge(profile_id, key, name=name, rarity=rarity)
    return True


def check_after_game(profiles: ProfileStore, profile: Profile) -> list[str]:
    """Run after a recorded score. Returns the keys newly earned."""
    earned = []
    if sum(profile.games_played.values()) >= 1 and _award(profiles, profile.id, "first_game"):
        earned.append("first_game")
    if profile.level >= 5 and _award(profiles, profile.id, "level_5"):
        earned.append("level_5")
    if profile.stats.perfect_scores >= 1 and _award(profiles, profile.id, "perfect_score"):
        earned.append("perfect_score")
    return earned


def check_streak_7(profiles: ProfileStore, profile_id: str, streak: int) -> bool:
    """Award when the quiz streak reaches 7."""
    return streak >= 7 and _award(profiles, profile_id, "streak_7")


def check_story_finished(profiles: ProfileStore, profile_id: str) -> bool:
    return _award(profiles, profile_id, "story_finished")


def check_verse_memorized(profiles: ProfileStore, profile_id: str) -> bool:
    return _award(profiles, profile_id, "verse_memorized")


def get_profile_achievements(profile: Profile) -> list[dict]:
    """Return list of every achievement with metadata and earned flag."""
    earned = set(profile.achievements)
    return [
        {
            "key": key,
            "icon": meta["icon"],
            "label": meta["label"],
            "desc": meta["desc"],
            "earned": key in earned,
        }
        for key, meta in ACHIEVEMENTS.items()
    ]

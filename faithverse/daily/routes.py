"""
Daily challenges, quiz streak and verse of the day.
"""
from fastapi import APIRouter, Depends

from faithverse.core.container import ProgressEngine
from faithverse.core.deps import get_engine, get_profile_or_404
from faithverse.daily.models import (
    ChallengeUpdate, DailyChallengeSet, DailyVerse, QuizCompletion, QuizCompletionResult, QuizStreak, VerseUpdate,
)
from faithverse.profiles.achievements import check_streak_7, check_verse_memorized
from faithverse.profiles.models import Profile

router = APIRouter(prefix="/daily", tags=["daily"])


@router.get("/{profile_id}", response_model=DailyChallengeSet)
def todays_challenges(profile: Profile = Depends(get_profile_or_404), engine: ProgressEngine = Depends(get_engine)):
    return engine.daily.get_today(profile.id)


@router.post("/{profile_id}/challenges/{challenge_id}", response_model=DailyChallengeSet)
def update_challenge(
    challenge_id: str,
    data: ChallengeUpdate,
    profile: Profile = Depends(get_profile_or_404),
    engine: ProgressEngine = Depends(get_engine),
):
    return engine.daily.update_challenge(profile.id, challenge_id, data.completed, current=data.current)


@router.post("/{profile_id}/quiz", response_model=QuizCompletionResult)
def record_quiz(
    data: QuizCompletion,
    profile: Profile = Depends(get_profile_or_404),
    engine: ProgressEngine = Depends(get_engine),
):
    result = engine.daily.record_quiz_completion(profile.id, data.passed)

    # Mirror the live streak onto the profile so stats stay in one place
    if profile.stats.streak_days != result.streak.current:
        engine.profiles.update(profile.id, {"stats": {"streak_days": result.streak.current}})
    check_streak_7(engine.profiles, profile.id, result.streak.current)
    return result


@router.get("/{profile_id}/streak", response_model=QuizStreak)
def quiz_streak(profile: Profile = Depends(get_profile_or_404), engine: ProgressEngine = Depends(get_engine)):
    return engine.streaks.get(profile.id)


@router.get("/{profile_id}/verse", response_model=DailyVerse)
def todays_verse(profile: Profile = Depends(get_profile_or_404), engine: ProgressEngine = Depends(get_engine)):
    return engine.verses.get_today(profile.id)


@router.post("/{profile_id}/verse", response_model=DailyVerse)
def complete_verse(
    data: VerseUpdate,
    profile: Profile = Depends(get_profile_or_404),
    engine: ProgressEngine = Depends(get_engine),
):
    already_memorized = engine.verses.get_today(profile.id).memorized
    verse = engine.verses.mark_completed(profile.id, data.completed, memorized=data.memorized)
    if verse.memorized and not already_memorized:
        engine.profiles.record_stat(profile.id, "verses_memorized")
        check_verse_memorized(engine.profiles, profile.id)
    return verse

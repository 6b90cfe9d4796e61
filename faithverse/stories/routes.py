from fastapi import APIRouter, Depends

from faithverse.core.container import ProgressEngine
from faithverse.core.deps import get_engine, get_profile_or_404, to_http
from faithverse.core.exceptions import EngineError
from faithverse.profiles.achievements import check_story_finished
from faithverse.profiles.models import Profile
from faithverse.stories.models import StoryChoice, StoryProgress

router = APIRouter(prefix="/stories", tags=["stories"])


@router.get("/{profile_id}", response_model=list[StoryProgress])
def list_stories(profile: Profile = Depends(get_profile_or_404), engine: ProgressEngine = Depends(get_engine)):
    return engine.stories.all_for(profile.id)


@router.get("/{profile_id}/{character}", response_model=StoryProgress)
def resume_story(
    character: str,
    profile: Profile = Depends(get_profile_or_404),
    engine: ProgressEngine = Depends(get_engine),
):
    try:
        return engine.stories.resume(profile.id, character)
    except EngineError as exc:
        raise to_http(exc)


@router.post("/{profile_id}/{character}/choice", response_model=StoryProgress)
def make_choice(
    profile_id: str,
    character: str,
    choice: StoryChoice,
    engine: ProgressEngine = Depends(get_engine),
):
    try:
        existing = engine.stories.load(profile_id, character)
        progress = engine.stories.apply_choice(profile_id, character, choice)
    except EngineError as exc:
        raise to_http(exc)

    if progress.completed and not (existing is not None and existing.completed):
        engine.profiles.record_stat(profile_id, "stories_finished")
        check_story_finished(engine.profiles, profile_id)
    return progress


@router.post("/{profile_id}/{character}/restart", response_model=StoryProgress)
def restart_story(profile_id: str, character: str, engine: ProgressEngine = Depends(get_engine)):
    try:
        return engine.stories.restart(profile_id, character)
    except EngineError as exc:
        raise to_http(exc)

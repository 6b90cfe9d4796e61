"""
Score recording for game modules.
"""
from fastapi import APIRouter, Depends, HTTPException

from faithverse.core.container import ProgressEngine
from faithverse.core.deps import get_engine, get_profile_or_404
from faithverse.profiles.achievements import check_after_game
from faithverse.profiles.models import Profile
from faithverse.scores.models import ModuleType, ScoreCreate, ScoreEvent

router = APIRouter(prefix="/scores", tags=["scores"])


@router.post("", status_code=201)
def record_score(data: ScoreCreate, engine: ProgressEngine = Depends(get_engine)):
    """
    Append a score event and grant XP.

    Unknown profiles are rejected up front; the ledger itself would keep the
    event as an orphan.
    """
    if engine.profiles.get(data.profile_id) is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    result = engine.scores.record(data.profile_id, data.module_type, data.score, context=data)
    earned = []
    if result.profile is not None:
        earned = check_after_game(engine.profiles, result.profile)
        if earned:
            result = result.model_copy(update={"profile": engine.profiles.get(data.profile_id)})

    return {
        **result.model_dump(mode="json", by_alias=True),
        "newAchievements": earned,
    }


@router.get("/{profile_id}", response_model=list[ScoreEvent])
def score_history(profile: Profile = Depends(get_profile_or_404), engine: ProgressEngine = Depends(get_engine)):
    return list(engine.scores.all_for(profile.id))


@router.get("/{profile_id}/best/{module_type}", response_model=ScoreEvent)
def best_score(
    module_type: ModuleType,
    profile: Profile = Depends(get_profile_or_404),
    engine: ProgressEngine = Depends(get_engine),
):
    best = engine.scores.best_score(profile.id, module_type)
    if best is None:
        raise HTTPException(status_code=404, detail="No scores recorded for this module")
    return best

from fastapi import APIRouter, Body, Depends, HTTPException

from faithverse.core.container import ProgressEngine
from faithverse.core.deps import get_engine, get_profile_or_404, to_http
from faithverse.core.exceptions import EngineError
from faithverse.profiles.achievements import get_profile_achievements
from faithverse.profiles.models import Profile, ProfileCreate, SignIn

router = APIRouter(prefix="/profiles", tags=["profiles"])


# =========================
# IDENTITY
# =========================
@router.post("", response_model=Profile, status_code=201)
def create_profile(data: ProfileCreate, engine: ProgressEngine = Depends(get_engine)):
    try:
        return engine.profiles.create(data)
    except EngineError as exc:
        raise to_http(exc)


@router.get("", response_model=list[Profile])
def list_profiles(engine: ProgressEngine = Depends(get_engine)):
    return engine.profiles.list_all()


@router.get("/current", response_model=Profile)
def current_profile(engine: ProgressEngine = Depends(get_engine)):
    profile = engine.profiles.get_current()
    if profile is None:
        raise HTTPException(status_code=404, detail="No profile is signed in")
    return profile


@router.post("/sign-in", response_model=Profile)
def sign_in(data: SignIn, engine: ProgressEngine = Depends(get_engine)):
    try:
        return engine.profiles.sign_in(data.username)
    except EngineError as exc:
        raise to_http(exc)


@router.post("/sign-out", status_code=204)
def sign_out(engine: ProgressEngine = Depends(get_engine)):
    engine.profiles.sign_out()


@router.get("/{profile_id}", response_model=Profile)
def get_profile(profile: Profile = Depends(get_profile_or_404)):
    return profile


@router.patch("/{profile_id}", response_model=Profile)
def update_profile(
    profile_id: str,
    fields: dict = Body(...),
    engine: ProgressEngine = Depends(get_engine),
):
    """Partial update. Nested preferences/stats are merged, not replaced."""
    try:
        return engine.profiles.update(profile_id, fields)
    except EngineError as exc:
        raise to_http(exc)
    except ValueError as exc:
        # pydantic ValidationError is a ValueError
        raise HTTPException(status_code=400, detail=str(exc))


@router.post("/{profile_id}/switch", response_model=Profile)
def switch_profile(profile_id: str, engine: ProgressEngine = Depends(get_engine)):
    try:
        return engine.profiles.switch_current(profile_id)
    except EngineError as exc:
        raise to_http(exc)


# =========================
# RESET / DELETE
# =========================
@router.post("/{profile_id}/reset", response_model=Profile)
def reset_profile(profile_id: str, engine: ProgressEngine = Depends(get_engine)):
    try:
        return engine.profiles.reset_progress(profile_id)
    except EngineError as exc:
        raise to_http(exc)


@router.delete("/{profile_id}", status_code=204)
def delete_profile(profile_id: str, engine: ProgressEngine = Depends(get_engine)):
    try:
        engine.profiles.delete(profile_id)
    except EngineError as exc:
        raise to_http(exc)


@router.get("/{profile_id}/achievements")
def profile_achievements(profile: Profile = Depends(get_profile_or_404)):
    return get_profile_achievements(profile)

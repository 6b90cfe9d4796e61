from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from faithverse.core.clock import Clock
from faithverse.core.container import ProgressEngine
from faithverse.core.exceptions import (
    BlankCharacter, DuplicateUsername, EngineError, MalformedDocument, NotFound, ProtectedField,
)
from faithverse.db.session import get_db
from faithverse.profiles.models import Profile
from faithverse.storage.adapter import KeyValueStore, SqlKeyValueStore

_clock = Clock()


def get_clock() -> Clock:
    """Overridden in tests with a FixedClock."""
    return _clock


def get_store(db: Session = Depends(get_db)) -> KeyValueStore:
    return SqlKeyValueStore(db)


def get_engine(
    store: KeyValueStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
) -> ProgressEngine:
    return ProgressEngine(store, clock)


def get_profile_or_404(
    profile_id: str,
    engine: ProgressEngine = Depends(get_engine),
) -> Profile:
    profile = engine.profiles.get(profile_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


def to_http(exc: EngineError) -> HTTPException:
    """Map an engine error onto the HTTP status a route should return."""
    if isinstance(exc, NotFound):
        print(f"[API] not found: {exc.message}", flush=True)
        return HTTPException(status_code=404, detail=exc.message)
    if isinstance(exc, (BlankCharacter, DuplicateUsername, MalformedDocument, ProtectedField)):
        return HTTPException(status_code=400, detail=exc.message)
    return HTTPException(status_code=500, detail=exc.message)

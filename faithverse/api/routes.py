"""
API routes for leaderboard, export/import and cloud sync.
"""
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query
from fastapi.responses import Response

from faithverse.core.container import ProgressEngine
from faithverse.core.deps import get_engine, get_profile_or_404, to_http
from faithverse.core.exceptions import EngineError
from faithverse.leaderboard.models import LeaderboardView, SortKey
from faithverse.profiles.models import Profile
from faithverse.transfer.models import ImportResult

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/leaderboard", response_model=LeaderboardView)
def leaderboard(
    sort: SortKey = Query(SortKey.XP),
    limit: Optional[int] = Query(None, ge=1),
    engine: ProgressEngine = Depends(get_engine),
):
    return engine.leaderboard.rank(sort, limit=limit)


@router.get("/export/{profile_id}")
def export_profile(profile: Profile = Depends(get_profile_or_404), engine: ProgressEngine = Depends(get_engine)):
    payload = engine.transfer.export_json(profile.id)
    return Response(
        content=payload,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="faithverse-{profile.username}.json"'},
    )


@router.post("/import", response_model=ImportResult, status_code=201)
def import_profile(document: Any = Body(...), engine: ProgressEngine = Depends(get_engine)):
    """
    Import an exported document as a new profile.

    The body is the export document itself. A JSON string holding the
    document is accepted too.
    """
    try:
        return engine.transfer.import_document(document)
    except EngineError as exc:
        print(f"[TRANSFER] import rejected: {exc.message}", flush=True)
        raise to_http(exc)


@router.post("/sync/{profile_id}", status_code=202)
def sync_profile(
    background_tasks: BackgroundTasks,
    profile: Profile = Depends(get_profile_or_404),
    engine: ProgressEngine = Depends(get_engine),
):
    """Schedule a best-effort cloud push. The export is taken now, the upload after the response."""
    if not engine.sync.configured():
        return engine.sync.sync_now(profile.id).model_dump(by_alias=True)

    payload = engine.transfer.export_json(profile.id)
    background_tasks.add_task(engine.sync.push, profile.id, payload)
    return {"success": True, "message": "Cloud sync scheduled."}

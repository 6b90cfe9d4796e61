from fastapi import APIRouter, Depends, HTTPException

from faithverse.core.deps import get_store
from faithverse.db.base import describe_database, engine
from faithverse.storage.adapter import KeyValueStore

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/store")
def debug_store_keys(prefix: str = "", store: KeyValueStore = Depends(get_store)):
    return [
        {"key": key, "size_bytes": len(store.get(key) or "")}
        for key in store.keys(prefix)
    ]


@router.get("/store/{key}")
def debug_store_value(key: str, store: KeyValueStore = Depends(get_store)):
    """Raw stored value, exactly as persisted."""
    value = store.get(key)
    if value is None:
        raise HTTPException(status_code=404, detail="Key not found")
    return {"key": key, "value": value}


@router.get("/diagnostics/db")
def db_diagnostics():
    """Backend, redacted URL and SQLite file facts. Exposed only with ENABLE_DEBUG_ROUTES=1."""
    return describe_database(engine)

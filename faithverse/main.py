from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from faithverse.core.config import ENABLE_DEBUG_ROUTES
from faithverse.db.base import Base, engine
from faithverse.storage.models import KeyValueEntry  # noqa: F401  Import so create_all picks it up
from faithverse.web.debug_routes import router as debug_router

from faithverse.profiles.routes import router as profile_router
from faithverse.scores.routes import router as score_router
from faithverse.stories.routes import router as story_router
from faithverse.daily.routes import router as daily_router
from faithverse.api.routes import router as api_router


app = FastAPI(title="FaithVerse Progress Engine", version="0.1.0")

# Only expose debug routes (store dump and diagnostics) when explicitly enabled.
if ENABLE_DEBUG_ROUTES:
    app.include_router(debug_router)

# Create database tables (still useful in dev; in production prefer Alembic)
Base.metadata.create_all(bind=engine)

# Include routers
app.include_router(profile_router)
app.include_router(score_router)
app.include_router(story_router)
app.include_router(daily_router)
app.include_router(api_router)


@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/docs")

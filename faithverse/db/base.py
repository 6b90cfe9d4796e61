"""
Database engine for the key-value store.

DATABASE_URL picks the backend; without it the engine keeps a local SQLite
file next to where the app is started.
"""
import os
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

DEFAULT_DATABASE_URL = "sqlite:///./faithverse.db"


def database_url() -> str:
    url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL).strip()
    if url.startswith("postgres://"):
        # SQLAlchemy 2.x only knows the driver-qualified scheme
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


def make_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # Requests run in FastAPI's threadpool
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


def describe_database(db_engine: Engine) -> dict:
    """Backend facts safe to print or return: password hidden, file size for SQLite."""
    url = db_engine.url
    info = {
        "backend": url.get_backend_name(),
        "url": url.render_as_string(hide_password=True),
    }
    if info["backend"] == "sqlite":
        if url.database in (None, "", ":memory:"):
            info["sqlite_path"] = ":memory:"
        else:
            path = Path(url.database).resolve()
            info["sqlite_path"] = str(path)
            info["sqlite_size_bytes"] = path.stat().st_size if path.exists() else 0
    else:
        info.update({"host": url.host, "port": url.port, "database": url.database})
    return info


DATABASE_URL = database_url()

engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

try:
    print("[DB] " + " ".join(f"{k}={v}" for k, v in describe_database(engine).items()), flush=True)
except OSError as exc:
    print("[DB] Could not describe database:", repr(exc), flush=True)

from typing import Generator

from sqlalchemy.orm import Session

from faithverse.db.base import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from faithverse.db.base import Base


class KeyValueEntry(Base):
    """
    One serialized record per key.

    The engine never queries inside `value`; each component owns its keys and
    rewrites the whole value on every change (last writer wins).
    """
    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

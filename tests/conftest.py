import os
from datetime import datetime, timezone

import pytest

# Keep tests off the local faithverse.db file.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from faithverse.core.clock import FixedClock  # noqa: E402
from faithverse.core.container import ProgressEngine  # noqa: E402
from faithverse.profiles.models import ProfileCreate  # noqa: E402
from faithverse.storage.adapter import MemoryKeyValueStore  # noqa: E402


START = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FixedClock(START)


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def engine(store, clock):
    return ProgressEngine(store, clock)


@pytest.fixture
def alice(engine):
    return engine.profiles.create(ProfileCreate(username="alice", display_name="Alice"))

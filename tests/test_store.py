import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from faithverse.core.container import ProgressEngine
from faithverse.db.base import Base, describe_database
from faithverse.profiles.models import ProfileCreate
from faithverse.profiles.service import PROFILES_KEY
from faithverse.storage.adapter import SqlKeyValueStore
from faithverse.storage.models import KeyValueEntry  # noqa: F401


@pytest.fixture
def sql_store():
    db_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=db_engine)
    db = sessionmaker(bind=db_engine)()
    try:
        yield SqlKeyValueStore(db)
    finally:
        db.close()


def test_sql_store_crud(sql_store):
    assert sql_store.get("faithverse_x") is None

    sql_store.set("faithverse_x", "1")
    sql_store.set("faithverse_x", "2")
    sql_store.set("other_%", "3")

    assert sql_store.get("faithverse_x") == "2"
    assert sql_store.keys("faithverse_") == ["faithverse_x"]
    assert sql_store.keys() == ["faithverse_x", "other_%"]

    sql_store.remove("faithverse_x")
    sql_store.remove("faithverse_x")
    assert sql_store.get("faithverse_x") is None


def test_engine_runs_on_sql_store(sql_store, clock):
    engine = ProgressEngine(sql_store, clock)
    profile = engine.profiles.create(ProfileCreate(username="alice"))

    reopened = ProgressEngine(sql_store, clock)
    assert reopened.profiles.get_current().id == profile.id


def test_unparsable_profiles_read_as_empty(engine, store):
    store.set(PROFILES_KEY, "][")
    assert engine.profiles.list_all() == []

    # the engine keeps working on top of the bad value
    engine.profiles.create(ProfileCreate(username="alice"))
    assert [p.username for p in engine.profiles.list_all()] == ["alice"]


def test_bad_item_in_list_is_skipped(engine, store, alice):
    items = json.loads(store.get(PROFILES_KEY))
    items.append({"id": "user_broken"})
    items.append("garbage")
    store.set(PROFILES_KEY, json.dumps(items))

    assert [p.id for p in engine.profiles.list_all()] == [alice.id]


def test_non_list_value_reads_as_empty(engine, store):
    store.set(PROFILES_KEY, json.dumps({"id": "user_1"}))
    assert engine.profiles.list_all() == []


def test_describe_database_for_memory_sqlite():
    info = describe_database(create_engine("sqlite://"))
    assert info["backend"] == "sqlite"
    assert info["sqlite_path"] == ":memory:"

# tests/test_stores.py

import pytest

from edurecords.core.exceptions import ConfigurationError
from edurecords.persistence import (
    DatabaseFactory, MemoryStore, SQLiteDatabase, SQLiteStore, StoreFactory
)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, sqlite_database):
    if request.param == "memory":
        return MemoryStore("students")
    return SQLiteStore(sqlite_database, "students")


def test_fetch_missing_key_returns_none(store):
    assert store.fetch("missing") is None
    assert "missing" not in store


def test_store_then_fetch(store):
    store.store("k1", {"id": "k1", "name": "Ada"})

    assert store.fetch("k1") == {"id": "k1", "name": "Ada"}
    assert "k1" in store
    assert len(store) == 1


def test_store_replaces_existing_record(store):
    store.store("k1", {"id": "k1", "name": "Ada"})
    store.store("k1", {"id": "k1", "name": "Ada L."})

    assert store.fetch("k1")["name"] == "Ada L."
    assert len(store) == 1


def test_remove_returns_record_once(store):
    store.store("k1", {"id": "k1", "tags": ["a"]})

    assert store.remove("k1") == {"id": "k1", "tags": ["a"]}
    assert store.remove("k1") is None
    assert store.fetch("k1") is None
    assert len(store) == 0


def test_values_in_key_order(store):
    for key in ("c", "a", "b"):
        store.store(key, {"id": key})

    assert [v["id"] for v in store.values()] == ["a", "b", "c"]


def test_values_empty(store):
    assert store.values() == []


def test_memory_store_does_not_alias_records():
    store = MemoryStore()
    record = {"id": "k1", "task": ["p1"]}
    store.store("k1", record)

    record["task"].append("p2")
    fetched = store.fetch("k1")
    fetched["task"].append("p3")

    assert store.fetch("k1") == {"id": "k1", "task": ["p1"]}


def test_sqlite_collections_are_isolated(sqlite_database):
    students = SQLiteStore(sqlite_database, "students")
    subjects = SQLiteStore(sqlite_database, "subjects")

    students.store("same-id", {"kind": "student"})
    subjects.store("same-id", {"kind": "subject"})

    assert students.fetch("same-id") == {"kind": "student"}
    assert subjects.fetch("same-id") == {"kind": "subject"}
    assert len(students) == 1


def test_sqlite_store_survives_reopen(db_path):
    SQLiteStore(SQLiteDatabase(db_path), "subjects").store("k1", {"id": "k1", "created_at": 2 ** 63})

    reopened = SQLiteStore(SQLiteDatabase(db_path), "subjects")

    assert reopened.fetch("k1") == {"id": "k1", "created_at": 2 ** 63}


def test_sqlite_database_creates_records_table(sqlite_database):
    tables = sqlite_database.execute_query("SELECT name FROM sqlite_master WHERE type = 'table'")

    assert [t["name"] for t in tables] == ["records"]


def test_sqlite_database_rejects_in_memory_path():
    with pytest.raises(ConfigurationError):
        SQLiteDatabase(":memory:")


def test_store_factory(sqlite_database):
    assert isinstance(StoreFactory.create_store("memory", "students"), MemoryStore)
    assert isinstance(StoreFactory.create_store("SQLite", "students", sqlite_database), SQLiteStore)

    with pytest.raises(ConfigurationError):
        StoreFactory.create_store("sqlite", "students")

    with pytest.raises(ConfigurationError):
        StoreFactory.create_store("btree", "students")


def test_database_factory(db_path):
    assert isinstance(DatabaseFactory.create_database("sqlite", database_path=db_path), SQLiteDatabase)

    with pytest.raises(ConfigurationError):
        DatabaseFactory.create_database("postgresql")

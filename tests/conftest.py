# tests/conftest.py

import itertools

import pytest
from fastapi.testclient import TestClient

from edurecords.api import EduRecordsRestAPI
from edurecords.core.interfaces import Clock
from edurecords.persistence import MemoryStore, RepositoryRegistry, SQLiteDatabase, SQLiteStore


class FakeClock(Clock):
    """Deterministic clock advancing by a fixed step per reading."""

    def __init__(self, start: int = 1_000, step: int = 10):
        self.current = start
        self.step = step

    def now(self) -> int:
        reading = self.current
        self.current += self.step
        return reading


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter):04d}"


@pytest.fixture
def repositories(clock, id_factory):
    return RepositoryRegistry.build(MemoryStore, clock=clock, id_factory=id_factory)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "records.db")


@pytest.fixture
def sqlite_database(db_path):
    return SQLiteDatabase(db_path)


@pytest.fixture
def sqlite_repositories(sqlite_database, clock, id_factory):
    return RepositoryRegistry.build(
        lambda collection: SQLiteStore(sqlite_database, collection),
        clock=clock,
        id_factory=id_factory,
    )


@pytest.fixture
def client(repositories):
    return TestClient(EduRecordsRestAPI(repositories).app)

"""Pytest fixtures for land registry tests."""

import pytest

from registry.core import memory_registry, open_registry
from registry.store.database import LedgerDatabase, MemoryDatabase


class ManualClock:
    """Clock that only moves when a test says so."""

    def __init__(self, start: int = 1_000):
        self.value = start

    def now(self) -> int:
        return self.value

    def advance(self, delta: int = 1) -> int:
        self.value += delta
        return self.value


class SequenceIds:
    """Identifier generator issuing L1, L2, ... for readable assertions."""

    def __init__(self, prefix: str = "L"):
        self.prefix = prefix
        self.count = 0

    def next(self) -> str:
        self.count += 1
        return f"{self.prefix}{self.count}"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep host environment variables and config files out of every test."""
    for var in (
        "LAND_REGISTRY_DB",
        "LAND_REGISTRY_DATA_DIR",
        "LAND_REGISTRY_LOG_LEVEL",
        "LAND_REGISTRY_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    yield


@pytest.fixture
def db_path(tmp_path):
    """Path to a fresh ledger file."""
    return tmp_path / "data" / "ledger.db"


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def ids():
    return SequenceIds()


@pytest.fixture
def registry(db_path, clock, ids):
    """SQLite-backed registry with a manual clock and readable ids."""
    reg = open_registry(db_path, clock=clock, ids=ids)
    try:
        yield reg
    finally:
        reg.close()


@pytest.fixture(params=["sqlite", "memory"])
def any_registry(request, db_path, clock, ids):
    """Registry over each storage backend."""
    if request.param == "sqlite":
        reg = open_registry(db_path, clock=clock, ids=ids)
    else:
        reg = memory_registry(clock=clock, ids=ids)
    try:
        yield reg
    finally:
        reg.close()


@pytest.fixture(params=["sqlite", "memory"])
def database(request, db_path):
    """Open database of each backend."""
    if request.param == "sqlite":
        db = LedgerDatabase(db_path)
    else:
        db = MemoryDatabase()
    try:
        yield db
    finally:
        db.close()

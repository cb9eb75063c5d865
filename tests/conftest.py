from datetime import UTC, datetime
from pathlib import Path

import pytest

from src.adapters.clock import FixedClock
from src.adapters.memory import InMemoryLedgerStore
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteLedgerStore

PROJECT_ROOT = Path(__file__).parent.parent


def migrated_db(path: Path) -> str:
    db = str(path / "ledger.db")
    SQLiteMigrator(db, PROJECT_ROOT / "migrations").run_migrations()
    return db


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 2, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def db_path(tmp_path) -> str:
    """A fresh SQLite file with every migration applied."""
    return migrated_db(tmp_path)


@pytest.fixture
def sqlite_store(db_path) -> SQLiteLedgerStore:
    return SQLiteLedgerStore(db_path)


@pytest.fixture
def memory_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    """Both store adapters; behaviour must match."""
    if request.param == "memory":
        return InMemoryLedgerStore()
    return SQLiteLedgerStore(migrated_db(tmp_path))

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from showsync.adapters.sqlalchemy import start_mappers
from showsync.adapters.sqlalchemy.migrations import upgrade_head
from showsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    shutdown,
    startup,
)
from tests.support.catalog import InMemoryCatalog

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

# tunables a developer shell may export; tests opt back in with monkeypatch
_SHOWSYNC_TUNABLES = (
    "SHOWSYNC_LOG_LEVEL",
    "SHOWSYNC_SUGGESTION_CUTOFF",
    "SHOWSYNC_SUGGESTION_LIMIT",
    "SHOWSYNC_VENUES_FILE",
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture(autouse=True)
def _isolate_showsync_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _SHOWSYNC_TUNABLES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    """Migrated in-memory catalog; every connection sees the same database."""

    engine = create_engine(
        "sqlite+pysqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        future=True,
    )
    start_mappers()
    upgrade_head(engine=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    with Session(sqlite_engine) as session:
        yield session


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyCatalogUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)
    yield SqlAlchemyCatalogUnitOfWork
    shutdown()


@pytest.fixture
def catalog() -> InMemoryCatalog:
    return InMemoryCatalog()

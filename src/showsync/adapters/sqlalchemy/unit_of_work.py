"""Catalog unit of work over a process-wide SQLAlchemy engine.

:func:`startup` binds the engine, registers the mappers and migrates the schema
once per process. Each unit of work then owns one session, and the executor
commits it after every record, so a failed record only rolls back its own writes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from showsync.adapters.sqlalchemy.mappings import start_mappers
from showsync.adapters.sqlalchemy.migrations import upgrade_head
from showsync.adapters.sqlalchemy.repositories import (
    SqlAlchemyArtistRepository,
    SqlAlchemyShowRepository,
    SqlAlchemyVenueRepository,
)
from showsync.config import get_database_uri
from showsync.domain.ports import CatalogRepositories, RepositoryCollection
from showsync.domain.reconciliation import PersistenceError

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the catalog store is used before :func:`startup` or twice without force."""


@dataclass(slots=True)
class _CatalogStore:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine) -> None:
        # objects stay readable after the per-record commit
        self.engine = engine
        self.sessions = sessionmaker(bind=engine, expire_on_commit=False)

    def release(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.sessions = None

    def open_session(self) -> Session:
        if self.sessions is None:
            raise StartupError(
                "Catalog store not started. Call showsync.adapters.sqlalchemy.startup() "
                "before opening a unit of work."
            )
        return self.sessions()


_STORE = _CatalogStore()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the catalog engine and bring its schema to the latest revision."""

    if _STORE.engine is not None and not force:
        raise StartupError("Catalog store already started. Pass force=True to rebind it.")

    resolved = engine or create_engine(database_uri or get_database_uri(), future=True)
    start_mappers()
    upgrade_head(engine=resolved)
    _STORE.bind(resolved)
    log.info("Catalog store bound to %s", resolved.url.render_as_string(hide_password=True))


def configured_engine() -> Engine | None:
    return _STORE.engine


def is_started() -> bool:
    return _STORE.engine is not None


def shutdown() -> None:
    """Dispose the engine and forget it; safe to call when not started."""

    _STORE.release()


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session per ``with`` block, with repositories built on top of it."""

    def __init__(self) -> None:
        if not is_started():
            raise StartupError("Catalog store not started")
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = _STORE.open_session()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Commit failed: {exc}") from exc

    def rollback(self) -> None:
        self.session.rollback()


class SqlAlchemyCatalogUnitOfWork(BaseSqlAlchemyUnitOfWork[CatalogRepositories]):
    def _build_repositories(self, session: Session) -> CatalogRepositories:
        return CatalogRepositories(
            artists=SqlAlchemyArtistRepository(session),
            venues=SqlAlchemyVenueRepository(session),
            shows=SqlAlchemyShowRepository(session),
        )


if TYPE_CHECKING:
    from showsync.domain.ports import CatalogUnitOfWork

    _uow_check: CatalogUnitOfWork = SqlAlchemyCatalogUnitOfWork()

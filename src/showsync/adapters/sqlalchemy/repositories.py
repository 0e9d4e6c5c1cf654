"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from showsync.adapters.sqlalchemy.mappings import (
    artist_table,
    show_table,
    show_venue_table,
    venue_table,
)
from showsync.domain.model import Artist, Show, Venue, name_key
from showsync.domain.reconciliation import PersistenceError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from sqlalchemy.orm import Session

    from showsync.domain.model import Entity


class SqlAlchemyCatalogRepository[TEntity: Entity]:
    """Shared helpers for repositories managing catalog entities."""

    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def get(self, entity_id: int) -> TEntity | None:
        return self.session.get(self._entity_cls, entity_id)

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)
        self._flush(f"add {entity.entity_type}")

    def _flush(self, action: str) -> None:
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Could not {action}: {exc}") from exc


class SqlAlchemyArtistRepository(SqlAlchemyCatalogRepository[Artist]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Artist)

    def find_by_name(self, name: str) -> Artist | None:
        stmt = (
            select(Artist)
            .where(artist_table.c._name_key == name_key(name))  # noqa: SLF001
            .order_by(artist_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def list_all(self) -> Sequence[Artist]:
        return self.session.execute(select(Artist).order_by(artist_table.c.id)).scalars().all()


class SqlAlchemyVenueRepository(SqlAlchemyCatalogRepository[Venue]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Venue)

    def find_by_name_and_city(self, name: str, city: str) -> Venue | None:
        stmt = (
            select(Venue)
            .where(venue_table.c._name_key == name_key(name))  # noqa: SLF001
            .where(venue_table.c._city_key == name_key(city))  # noqa: SLF001
            .order_by(venue_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def list_all(self) -> Sequence[Venue]:
        return self.session.execute(select(Venue).order_by(venue_table.c.id)).scalars().all()


class SqlAlchemyShowRepository(SqlAlchemyCatalogRepository[Show]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Show)

    def update(self, show: Show) -> None:
        self._flush(f"update show #{show.id}")

    def find_by_source_id(self, origin: str, event_id: str) -> Show | None:
        stmt = (
            select(Show)
            .where(show_table.c.source_origin == origin)
            .where(show_table.c.source_event_id == event_id)
            .order_by(show_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def list_by_venue_and_date(self, venue_id: int, day: date) -> Sequence[Show]:
        stmt = (
            select(Show)
            .join(show_venue_table, show_venue_table.c.show_id == show_table.c.id)
            .where(show_venue_table.c.venue_id == venue_id)
            .where(show_table.c.event_date == day)
            .order_by(show_table.c.id)
        )
        return self.session.execute(stmt).scalars().unique().all()

    def find_by_headliner_venue_date(
        self,
        headliner_id: int,
        venue_id: int,
        day: date,
    ) -> Show | None:
        for show in self.list_by_venue_and_date(venue_id, day):
            headliner = show.headliner
            primary_venue = show.primary_venue
            if (
                headliner is not None
                and headliner.id == headliner_id
                and primary_venue is not None
                and primary_venue.id == venue_id
            ):
                return show
        return None


if TYPE_CHECKING:
    from showsync.domain.ports import ArtistRepository, ShowRepository, VenueRepository

    _session_stub = cast("Session", object())
    _artist_repo: ArtistRepository = SqlAlchemyArtistRepository(_session_stub)
    _venue_repo: VenueRepository = SqlAlchemyVenueRepository(_session_stub)
    _show_repo: ShowRepository = SqlAlchemyShowRepository(_session_stub)

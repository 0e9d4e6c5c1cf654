"""In-memory catalog fakes for reconciliation tests."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date
from itertools import count
from typing import TYPE_CHECKING, Literal

from showsync.domain.model import (
    Artist,
    SetType,
    Show,
    ShowSource,
    ShowStatus,
    Venue,
    name_key,
)
from showsync.domain.ports import CatalogRepositories
from showsync.domain.reconciliation import PersistenceError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from types import TracebackType

    from showsync.domain.model import Entity

MUTATING_CALLS = frozenset({"add_artist", "add_venue", "add_show", "update_show", "commit"})


@dataclass(slots=True)
class _State:
    artists: dict[int, Artist] = field(default_factory=dict)
    venues: dict[int, Venue] = field(default_factory=dict)
    shows: dict[int, Show] = field(default_factory=dict)


class InMemoryCatalog:
    """Committed catalog state plus a log of repository calls.

    ``fail_when`` receives the call name and entity and may veto the write,
    which then raises ``PersistenceError`` like a storage failure would.
    """

    def __init__(self) -> None:
        self.committed = _State()
        self.calls: list[tuple[str, object]] = []
        self.fail_when: Callable[[str, Entity], bool] | None = None
        self._ids: Iterator[int] = count(1)

    def next_id(self) -> int:
        return next(self._ids)

    @property
    def mutating_calls(self) -> list[tuple[str, object]]:
        return [call for call in self.calls if call[0] in MUTATING_CALLS]

    def record(self, name: str, payload: object = None) -> None:
        self.calls.append((name, payload))

    def check_failure(self, name: str, entity: Entity) -> None:
        if self.fail_when is not None and self.fail_when(name, entity):
            raise PersistenceError(f"simulated failure in {name}")

    def artist(self, name: str, **kwargs: object) -> Artist:
        artist = Artist(name=name, **kwargs)  # pyright: ignore[reportArgumentType]
        artist.id = self.next_id()
        self.committed.artists[artist.id] = artist
        return artist

    def venue(
        self,
        name: str,
        city: str = "Phoenix",
        state: str = "AZ",
        *,
        verified: bool = True,
        **kwargs: object,
    ) -> Venue:
        venue = Venue(
            name=name,
            city=city,
            state=state,
            verified=verified,
            **kwargs,  # pyright: ignore[reportArgumentType]
        )
        venue.id = self.next_id()
        self.committed.venues[venue.id] = venue
        return venue

    def show(
        self,
        headliner: Artist,
        venue: Venue,
        event_date: date,
        *,
        status: ShowStatus = ShowStatus.APPROVED,
        title: str | None = None,
        source: ShowSource = ShowSource.USER,
        source_origin: str | None = None,
        source_event_id: str | None = None,
        openers: Sequence[Artist] = (),
    ) -> Show:
        show = Show(
            event_date=event_date,
            title=title,
            status=status,
            source=source,
            source_origin=source_origin,
            source_event_id=source_event_id,
        )
        show.add_artist(headliner, position=0, set_type=SetType.HEADLINER)
        for position, opener in enumerate(openers, start=1):
            show.add_artist(opener, position=position, set_type=SetType.OPENER)
        show.add_venue(venue)
        show.id = self.next_id()
        self.committed.shows[show.id] = show
        return show

    def unit_of_work(self) -> FakeCatalogUnitOfWork:
        return FakeCatalogUnitOfWork(self)


class _FakeRepository:
    def __init__(self, uow: FakeCatalogUnitOfWork) -> None:
        self._uow = uow

    @property
    def _state(self) -> _State:
        return self._uow.working

    @property
    def _catalog(self) -> InMemoryCatalog:
        return self._uow.catalog


class FakeArtistRepository(_FakeRepository):
    def get(self, entity_id: int) -> Artist | None:
        self._catalog.record("get_artist", entity_id)
        return self._state.artists.get(entity_id)

    def add(self, entity: Artist) -> None:
        self._catalog.record("add_artist", entity.name)
        self._catalog.check_failure("add_artist", entity)
        entity.id = self._catalog.next_id()
        self._state.artists[entity.id] = entity

    def find_by_name(self, name: str) -> Artist | None:
        self._catalog.record("find_artist", name)
        key = name_key(name)
        matches = [artist for artist in self.list_all() if artist.lookup_key == key]
        return matches[0] if matches else None

    def list_all(self) -> list[Artist]:
        return [self._state.artists[key] for key in sorted(self._state.artists)]


class FakeVenueRepository(_FakeRepository):
    def get(self, entity_id: int) -> Venue | None:
        self._catalog.record("get_venue", entity_id)
        return self._state.venues.get(entity_id)

    def add(self, entity: Venue) -> None:
        self._catalog.record("add_venue", entity.name)
        self._catalog.check_failure("add_venue", entity)
        entity.id = self._catalog.next_id()
        self._state.venues[entity.id] = entity

    def find_by_name_and_city(self, name: str, city: str) -> Venue | None:
        self._catalog.record("find_venue", (name, city))
        key = (name_key(name), name_key(city))
        matches = [venue for venue in self.list_all() if venue.lookup_key == key]
        return matches[0] if matches else None

    def list_all(self) -> list[Venue]:
        return [self._state.venues[key] for key in sorted(self._state.venues)]


class FakeShowRepository(_FakeRepository):
    def get(self, entity_id: int) -> Show | None:
        self._catalog.record("get_show", entity_id)
        return self._state.shows.get(entity_id)

    def add(self, entity: Show) -> None:
        self._catalog.record("add_show", entity.title)
        self._catalog.check_failure("add_show", entity)
        entity.id = self._catalog.next_id()
        self._state.shows[entity.id] = entity

    def update(self, show: Show) -> None:
        self._catalog.record("update_show", show.id)
        self._catalog.check_failure("update_show", show)

    def find_by_headliner_venue_date(
        self,
        headliner_id: int,
        venue_id: int,
        day: date,
    ) -> Show | None:
        for show in self.list_by_venue_and_date(venue_id, day):
            headliner = show.headliner
            primary = show.primary_venue
            if headliner is not None and headliner.id == headliner_id and primary is not None:
                if primary.id == venue_id:
                    return show
        return None

    def find_by_source_id(self, origin: str, event_id: str) -> Show | None:
        for key in sorted(self._state.shows):
            show = self._state.shows[key]
            if show.source_origin == origin and show.source_event_id == event_id:
                return show
        return None

    def list_by_venue_and_date(self, venue_id: int, day: date) -> list[Show]:
        return [
            self._state.shows[key]
            for key in sorted(self._state.shows)
            if self._state.shows[key].event_date == day
            and any(venue.id == venue_id for venue in self._state.shows[key].venues)
        ]


class FakeCatalogUnitOfWork:
    """Unit of work over a private copy of the committed catalog."""

    def __init__(self, catalog: InMemoryCatalog) -> None:
        self.catalog = catalog
        self.working = _State()
        self._repositories = CatalogRepositories(
            artists=FakeArtistRepository(self),
            venues=FakeVenueRepository(self),
            shows=FakeShowRepository(self),
        )
        self.entered = False
        self.exited = False

    @property
    def repositories(self) -> CatalogRepositories:
        return self._repositories

    def __enter__(self) -> FakeCatalogUnitOfWork:
        self.entered = True
        self.working = copy.deepcopy(self.catalog.committed)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.exited = True
        return False

    def commit(self) -> None:
        self.catalog.record("commit")
        self.catalog.committed = copy.deepcopy(self.working)

    def rollback(self) -> None:
        self.catalog.record("rollback")
        self.working = copy.deepcopy(self.catalog.committed)

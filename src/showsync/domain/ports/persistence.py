"""Ports for persisting catalog aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from showsync.domain.model import Artist, Show, Venue

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store.

    ``add`` flushes immediately so the entity carries its id on return.
    """

    def get(self, entity_id: int) -> TEntity | None: ...

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ArtistRepository(Repository[Artist], Protocol):
    """Repository contract for artists."""

    def find_by_name(self, name: str) -> Artist | None: ...

    def list_all(self) -> Sequence[Artist]: ...


@runtime_checkable
class VenueRepository(Repository[Venue], Protocol):
    """Repository contract for venues."""

    def find_by_name_and_city(self, name: str, city: str) -> Venue | None: ...

    def list_all(self) -> Sequence[Venue]: ...


@runtime_checkable
class ShowRepository(Repository[Show], Protocol):
    """Repository contract for shows."""

    def find_by_headliner_venue_date(
        self,
        headliner_id: int,
        venue_id: int,
        day: date,
    ) -> Show | None: ...

    def find_by_source_id(self, origin: str, event_id: str) -> Show | None: ...

    def list_by_venue_and_date(self, venue_id: int, day: date) -> Sequence[Show]: ...

    def update(self, show: Show) -> None: ...

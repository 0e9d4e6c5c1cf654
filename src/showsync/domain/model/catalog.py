"""Catalog aggregates: artists, venues and the shows that bind them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from .entity import Entity
from .enums import EntityType, SetType, ShowSource, ShowStatus
from .social import SocialLinks

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date, datetime, time


def name_key(value: str) -> str:
    """Case- and whitespace-insensitive lookup key for names and cities."""

    return " ".join(value.split()).casefold()


@dataclass(eq=False, kw_only=True)
class Artist(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ARTIST

    name: str
    city: str | None = None
    state: str | None = None
    social: SocialLinks = field(default_factory=SocialLinks)

    @property
    def lookup_key(self) -> str:
        return name_key(self.name)


@dataclass(eq=False, kw_only=True)
class Venue(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.VENUE

    name: str
    city: str
    state: str
    address: str | None = None
    zipcode: str | None = None
    verified: bool = False
    social: SocialLinks = field(default_factory=SocialLinks)

    @property
    def lookup_key(self) -> tuple[str, str]:
        return name_key(self.name), name_key(self.city)


@dataclass(eq=False, kw_only=True)
class ShowArtist:
    """Association of an artist with a show's lineup."""

    artist: Artist
    position: int
    set_type: SetType = SetType.PERFORMER


@dataclass(frozen=True, slots=True, kw_only=True)
class ShowSnapshot:
    """Read-only view of a show used when checking for conflicts."""

    show_id: int
    event_date: date
    status: ShowStatus
    headliner_id: int | None
    venue_ids: tuple[int, ...]
    title: str | None = None
    source_origin: str | None = None
    source_event_id: str | None = None

    @property
    def primary_venue_id(self) -> int | None:
        return self.venue_ids[0] if self.venue_ids else None

    @property
    def blocks_duplicates(self) -> bool:
        return self.status not in (ShowStatus.REJECTED, ShowStatus.PRIVATE)


@dataclass(eq=False, kw_only=True)
class Show(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.SHOW

    event_date: date
    title: str | None = None
    start_time: time | None = None
    city: str | None = None
    state: str | None = None
    price: float | None = None
    age_requirement: str | None = None
    description: str | None = None
    status: ShowStatus = ShowStatus.PENDING
    source: ShowSource = ShowSource.USER
    source_origin: str | None = None
    source_event_id: str | None = None
    scraped_at: datetime | None = None
    ticket_url: str | None = None
    image_url: str | None = None
    is_sold_out: bool = False
    is_cancelled: bool = False
    duplicate_of_show_id: int | None = None

    _lineup: list[ShowArtist] = field(default_factory=list, init=False, repr=False)
    _venues: list[Venue] = field(default_factory=list, init=False, repr=False)

    @property
    def lineup(self) -> tuple[ShowArtist, ...]:
        return tuple(sorted(self._lineup, key=lambda entry: entry.position))

    @property
    def venues(self) -> tuple[Venue, ...]:
        return tuple(self._venues)

    @property
    def headliner(self) -> Artist | None:
        lineup = self.lineup
        for entry in lineup:
            if entry.set_type is SetType.HEADLINER:
                return entry.artist
        return lineup[0].artist if lineup else None

    @property
    def primary_venue(self) -> Venue | None:
        return self._venues[0] if self._venues else None

    def add_artist(
        self,
        artist: Artist,
        *,
        position: int,
        set_type: SetType = SetType.PERFORMER,
    ) -> ShowArtist:
        entry = ShowArtist(artist=artist, position=position, set_type=set_type)
        self._lineup.append(entry)
        return entry

    def add_venue(self, venue: Venue) -> None:
        if any(existing is venue for existing in self._venues):
            return
        self._venues.append(venue)

    def replace_lineup(self, entries: Iterable[ShowArtist]) -> None:
        self._lineup.clear()
        self._lineup.extend(entries)

    def replace_venues(self, venues: Iterable[Venue]) -> None:
        self._venues.clear()
        for venue in venues:
            self.add_venue(venue)

    def snapshot(self) -> ShowSnapshot:
        headliner = self.headliner
        return ShowSnapshot(
            show_id=self.require_id(),
            event_date=self.event_date,
            status=self.status,
            headliner_id=headliner.id if headliner is not None else None,
            venue_ids=tuple(venue.require_id() for venue in self._venues),
            title=self.title,
            source_origin=self.source_origin,
            source_event_id=self.source_event_id,
        )

"""Canonical, transient show records produced by the normalizer."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from showsync.domain.model import SetType, SocialLinks, name_key

if TYPE_CHECKING:
    from datetime import date, datetime, time

    from showsync.domain.model import ShowStatus


@dataclass(frozen=True, slots=True, kw_only=True)
class ArtistRef:
    """Unresolved reference to an artist billed on a show."""

    name: str
    position: int = 0
    set_type: SetType = SetType.PERFORMER
    city: str | None = None
    state: str | None = None
    social: SocialLinks = field(default_factory=SocialLinks)

    @property
    def key(self) -> str:
        return name_key(self.name)


@dataclass(frozen=True, slots=True, kw_only=True)
class VenueRef:
    """Unresolved reference to a venue hosting a show."""

    name: str
    city: str
    state: str
    address: str | None = None
    zipcode: str | None = None
    social: SocialLinks = field(default_factory=SocialLinks)

    @property
    def key(self) -> tuple[str, str]:
        return name_key(self.name), name_key(self.city)


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceMetadata:
    """Origin of an automatically discovered record."""

    origin: str
    event_id: str
    scraped_at: datetime | None = None
    ticket_url: str | None = None
    image_url: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ExportMetadata:
    version: str
    exported_at: datetime | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ShowRecord:
    event_date: date
    artists: tuple[ArtistRef, ...]
    venues: tuple[VenueRef, ...]
    title: str | None = None
    start_time: time | None = None
    city: str | None = None
    state: str | None = None
    price: float | None = None
    age_requirement: str | None = None
    description: str | None = None
    status: ShowStatus | None = None
    is_sold_out: bool = False
    is_cancelled: bool = False
    source: SourceMetadata | None = None
    export: ExportMetadata | None = None

    @property
    def headliner(self) -> ArtistRef | None:
        """Explicit headliner, else the lowest-position artist."""

        for artist in self.artists:
            if artist.set_type is SetType.HEADLINER:
                return artist
        if not self.artists:
            return None
        return min(self.artists, key=lambda artist: artist.position)

    @property
    def primary_venue(self) -> VenueRef | None:
        return self.venues[0] if self.venues else None

    @property
    def is_discovered(self) -> bool:
        return self.source is not None

    @property
    def label(self) -> str:
        headliner = self.headliner
        venue = self.primary_venue
        headliner_name = headliner.name if headliner is not None else "Unknown artist"
        venue_name = venue.name if venue is not None else "Unknown venue"
        return f"{headliner_name} @ {venue_name} ({self.event_date.isoformat()})"

    def effective_set_type(self, artist: ArtistRef) -> SetType:
        """Billing to persist for ``artist``; the implied headliner is promoted."""

        if artist.set_type is SetType.HEADLINER:
            return artist.set_type
        if artist is self.headliner:
            return SetType.HEADLINER
        return artist.set_type

    def with_location_defaults(self) -> ShowRecord:
        """Fill a missing city/state from the primary venue."""

        venue = self.primary_venue
        if venue is None or (self.city and self.state):
            return self
        return replace(self, city=self.city or venue.city, state=self.state or venue.state)

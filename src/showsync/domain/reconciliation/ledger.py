"""Per-batch memory of entities and shows created earlier in the same batch.

Both modes consult the ledger before the catalog so a record that depends on
an earlier record of the batch is classified the same way whether or not the
earlier write actually happened.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import count
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import date

    from showsync.domain.model import ShowSnapshot


@dataclass(frozen=True, slots=True, kw_only=True)
class LedgerArtist:
    entity_id: int
    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class LedgerVenue:
    entity_id: int
    name: str
    city: str
    verified: bool


@dataclass(slots=True)
class LedgerStage:
    """Changes made by one record, merged only once the record succeeds."""

    artists: dict[str, LedgerArtist] = field(default_factory=dict)
    venues: dict[tuple[str, str], LedgerVenue] = field(default_factory=dict)
    shows: list[ShowSnapshot] = field(default_factory=list)


@dataclass(slots=True)
class BatchLedger:
    _artists: dict[str, LedgerArtist] = field(default_factory=dict)
    _venues: dict[tuple[str, str], LedgerVenue] = field(default_factory=dict)
    _shows: dict[int, ShowSnapshot] = field(default_factory=dict)
    _placeholders: Iterator[int] = field(default_factory=lambda: count(-1, -1))

    def artist(self, key: str, stage: LedgerStage | None = None) -> LedgerArtist | None:
        if stage is not None and key in stage.artists:
            return stage.artists[key]
        return self._artists.get(key)

    def venue(
        self,
        key: tuple[str, str],
        stage: LedgerStage | None = None,
    ) -> LedgerVenue | None:
        if stage is not None and key in stage.venues:
            return stage.venues[key]
        return self._venues.get(key)

    @property
    def artist_ids(self) -> frozenset[int]:
        return frozenset(entry.entity_id for entry in self._artists.values())

    @property
    def venue_ids(self) -> frozenset[int]:
        return frozenset(entry.entity_id for entry in self._venues.values())

    @property
    def show_ids(self) -> frozenset[int]:
        return frozenset(self._shows)

    def show_by_source(self, origin: str, event_id: str) -> ShowSnapshot | None:
        for snapshot in self._shows.values():
            if snapshot.source_origin == origin and snapshot.source_event_id == event_id:
                return snapshot
        return None

    def shows_at(self, venue_id: int, day: date) -> list[ShowSnapshot]:
        return [
            snapshot
            for snapshot in self._shows.values()
            if snapshot.event_date == day and venue_id in snapshot.venue_ids
        ]

    def next_placeholder(self) -> int:
        """Negative ids stand in for rows a preview would create."""

        return next(self._placeholders)

    def merge(self, stage: LedgerStage) -> None:
        self._artists.update(stage.artists)
        self._venues.update(stage.venues)
        for snapshot in stage.shows:
            self._shows[snapshot.show_id] = snapshot

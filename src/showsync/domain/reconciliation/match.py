"""Resolve artist and venue references against the catalog.

Lookup order is the batch ledger, then an exact case-insensitive catalog
match, then similarity-ranked suggestions, then ``New``. Suggestions are
ranked with rapidfuzz's ``fuzz.ratio`` on processed names and ordered by a
total key, so an unchanged catalog always yields the same result.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from rapidfuzz import fuzz, utils

from showsync.domain.model import name_key

if TYPE_CHECKING:
    from collections.abc import Iterable

    from showsync.domain.ports import ArtistRepository, VenueRepository

    from .ledger import BatchLedger
    from .records import ArtistRef, VenueRef


log = getLogger(__name__)


class MatchStatus(StrEnum):
    MATCHED = "matched"
    SUGGESTED = "suggested"
    NEW = "new"


@dataclass(frozen=True, slots=True, kw_only=True)
class Candidate:
    entity_id: int
    name: str
    score: float
    city: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Matched:
    """Reference resolved to exactly one catalog entity."""

    entity_id: int
    name: str
    from_batch: bool = False
    status: Literal[MatchStatus.MATCHED] = MatchStatus.MATCHED


@dataclass(frozen=True, slots=True, kw_only=True)
class Suggested:
    """No exact match, but similar entities exist."""

    candidates: tuple[Candidate, ...]
    status: Literal[MatchStatus.SUGGESTED] = MatchStatus.SUGGESTED

    def __post_init__(self) -> None:
        if not self.candidates:
            raise ValueError("Suggested match must include at least one candidate")


@dataclass(frozen=True, slots=True, kw_only=True)
class New:
    status: Literal[MatchStatus.NEW] = MatchStatus.NEW


type MatchResult = Matched | Suggested | New


def matched_id(result: MatchResult | None) -> int | None:
    if isinstance(result, Matched):
        return result.entity_id
    return None


@dataclass(slots=True, kw_only=True)
class EntityMatcher:
    artists: ArtistRepository
    venues: VenueRepository
    ledger: BatchLedger
    suggestion_limit: int = 3
    suggestion_cutoff: float = 80.0

    def match_artist(self, ref: ArtistRef) -> MatchResult:
        batch_entry = self.ledger.artist(ref.key)
        if batch_entry is not None:
            return Matched(entity_id=batch_entry.entity_id, name=batch_entry.name, from_batch=True)

        existing = self.artists.find_by_name(ref.name)
        if existing is not None:
            return Matched(entity_id=existing.require_id(), name=existing.name)

        excluded = self.ledger.artist_ids
        candidates = self._rank(
            ref.name,
            (
                (artist.require_id(), artist.name, artist.city)
                for artist in self.artists.list_all()
                if artist.id not in excluded
            ),
        )
        if candidates:
            log.debug("Artist %r has %d suggestion(s)", ref.name, len(candidates))
            return Suggested(candidates=candidates)
        return New()

    def match_venue(self, ref: VenueRef) -> MatchResult:
        batch_entry = self.ledger.venue(ref.key)
        if batch_entry is not None:
            return Matched(entity_id=batch_entry.entity_id, name=batch_entry.name, from_batch=True)

        existing = self.venues.find_by_name_and_city(ref.name, ref.city)
        if existing is not None:
            return Matched(entity_id=existing.require_id(), name=existing.name)

        excluded = self.ledger.venue_ids
        candidates = self._rank(
            ref.name,
            (
                (venue.require_id(), venue.name, venue.city)
                for venue in self.venues.list_all()
                if venue.id not in excluded
            ),
            prefer_city=ref.city,
        )
        if candidates:
            log.debug("Venue %r has %d suggestion(s)", ref.name, len(candidates))
            return Suggested(candidates=candidates)
        return New()

    def _rank(
        self,
        query: str,
        entries: Iterable[tuple[int, str, str | None]],
        *,
        prefer_city: str | None = None,
    ) -> tuple[Candidate, ...]:
        if self.suggestion_limit <= 0:
            return ()
        processed_query = utils.default_process(query)
        if not processed_query:
            return ()
        city_key = name_key(prefer_city) if prefer_city else None

        scored: list[tuple[tuple[int, float, str, int], Candidate]] = []
        for entity_id, name, city in entries:
            score = fuzz.ratio(
                processed_query,
                utils.default_process(name),
                score_cutoff=self.suggestion_cutoff,
            )
            if score <= 0:
                continue
            same_city = city_key is not None and city is not None and name_key(city) == city_key
            order = (0 if same_city or city_key is None else 1, -score, name_key(name), entity_id)
            scored.append(
                (order, Candidate(entity_id=entity_id, name=name, score=score, city=city))
            )

        scored.sort(key=lambda item: item[0])
        return tuple(candidate for _, candidate in scored[: self.suggestion_limit])

"""Decide whether a matched record collides with a show already in the catalog."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from showsync.domain.model import ShowStatus

from .match import Matched, Suggested, matched_id

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from showsync.domain.model import ShowSnapshot

    from .match import MatchResult
    from .records import ArtistRef, ShowRecord, VenueRef


class ConflictHint(StrEnum):
    READY = "ready"
    DUPLICATE = "duplicate"
    REJECTED = "rejected"
    FLAG_FOR_REVIEW = "flag_for_review"
    ERROR = "error"


@dataclass(frozen=True, slots=True, kw_only=True)
class ArtistMatch:
    ref: ArtistRef
    result: MatchResult


@dataclass(frozen=True, slots=True, kw_only=True)
class VenueMatch:
    ref: VenueRef
    result: MatchResult


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictReport:
    hint: ConflictHint
    warnings: tuple[str, ...] = ()
    conflicting_show: ShowSnapshot | None = None
    reason: str | None = None


def _suggestion_warning(kind: str, name: str, result: Suggested) -> str:
    names = ", ".join(candidate.name for candidate in result.candidates)
    return f"{kind} '{name}' is similar to existing: {names}"


def _tally_warning(label: str, results: Sequence[MatchResult]) -> str | None:
    new = sum(1 for result in results if not isinstance(result, Matched))
    if not new:
        return None
    return f"{label}: {len(results) - new} matched, {new} new"


def advisory_warnings(
    artist_matches: Sequence[ArtistMatch],
    venue_matches: Sequence[VenueMatch],
) -> list[str]:
    """Non-blocking notes about suggestions and entities that will be created."""

    warnings: list[str] = [
        _suggestion_warning("Artist", match.ref.name, match.result)
        for match in artist_matches
        if isinstance(match.result, Suggested)
    ]
    artist_tally = _tally_warning("Artists", [match.result for match in artist_matches])
    if artist_tally:
        warnings.append(artist_tally)

    warnings.extend(
        _suggestion_warning("Venue", match.ref.name, match.result)
        for match in venue_matches
        if isinstance(match.result, Suggested)
    )
    venue_tally = _tally_warning("Venues", [match.result for match in venue_matches])
    if venue_tally:
        warnings.append(venue_tally)
    return warnings


def _first(shows: Iterable[ShowSnapshot]) -> ShowSnapshot | None:
    return next(iter(shows), None)


def detect(
    record: ShowRecord,
    headliner_match: MatchResult | None,
    venue_match: MatchResult | None,
    existing_shows: Sequence[ShowSnapshot],
    *,
    artist_matches: Sequence[ArtistMatch] = (),
    venue_matches: Sequence[VenueMatch] = (),
) -> ConflictReport:
    """Classify ``record`` against ``existing_shows`` on its date.

    A show with the same headliner, primary venue and calendar date is a
    duplicate for user submissions; discovered records are instead flagged for
    review, and are rejected outright when an operator already rejected a show
    at that venue on that date.
    """

    if record.headliner is None or headliner_match is None:
        return ConflictReport(hint=ConflictHint.ERROR, reason="No headliner could be determined")

    warnings = advisory_warnings(artist_matches, venue_matches)
    headliner_id = matched_id(headliner_match)
    venue_id = matched_id(venue_match)
    if venue_id is None:
        return ConflictReport(hint=ConflictHint.READY, warnings=tuple(warnings))

    same_venue_day = [
        show
        for show in existing_shows
        if show.event_date == record.event_date and show.primary_venue_id == venue_id
    ]
    duplicate = _first(
        show
        for show in same_venue_day
        if show.blocks_duplicates and headliner_id is not None and show.headliner_id == headliner_id
    )

    venue_name = record.primary_venue.name if record.primary_venue else "the venue"
    warnings.extend(
        f"Another show is listed at {venue_name} on {record.event_date.isoformat()}: "
        f"{show.title or 'untitled show'}"
        for show in same_venue_day
        if show.blocks_duplicates and show is not duplicate and show.headliner_id != headliner_id
    )

    if record.is_discovered:
        rejected = _first(show for show in same_venue_day if show.status == ShowStatus.REJECTED)
        if rejected is not None:
            return ConflictReport(
                hint=ConflictHint.REJECTED,
                warnings=tuple(warnings),
                conflicting_show=rejected,
                reason=f"matches previously rejected show #{rejected.show_id}",
            )
        if duplicate is not None:
            return ConflictReport(
                hint=ConflictHint.FLAG_FOR_REVIEW,
                warnings=tuple(warnings),
                conflicting_show=duplicate,
                reason=f"possible duplicate of show #{duplicate.show_id}",
            )
    elif duplicate is not None:
        return ConflictReport(
            hint=ConflictHint.DUPLICATE,
            warnings=tuple(warnings),
            conflicting_show=duplicate,
            reason=f"already exists as show #{duplicate.show_id}",
        )

    return ConflictReport(hint=ConflictHint.READY, warnings=tuple(warnings))

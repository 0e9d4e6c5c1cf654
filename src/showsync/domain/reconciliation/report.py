"""Fold per-record outcomes into a report with operator-facing messages."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from .match import Matched, Suggested
from .outcomes import (
    Duplicate,
    FlaggedForReview,
    ImportMode,
    Imported,
    OutcomeKind,
    Rejected,
    Updated,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .conflicts import ArtistMatch, VenueMatch
    from .match import MatchResult
    from .outcomes import ImportOutcome


# (commit prefix, preview prefix)
_PREFIXES: Final[dict[OutcomeKind, tuple[str, str]]] = {
    OutcomeKind.IMPORTED: ("IMPORTED", "WOULD IMPORT"),
    OutcomeKind.UPDATED: ("UPDATED", "WOULD UPDATE"),
    OutcomeKind.DUPLICATE: ("DUPLICATE", "DUPLICATE"),
    OutcomeKind.FLAGGED_FOR_REVIEW: ("FLAGGED FOR REVIEW", "WOULD FLAG FOR REVIEW"),
    OutcomeKind.REJECTED: ("REJECTED", "REJECTED"),
    OutcomeKind.ERROR: ("ERROR", "ERROR"),
}
SKIP_PREFIX: Final[str] = "SKIP"


@dataclass(frozen=True, slots=True, kw_only=True)
class RecordResult:
    """Executor output for one input record, before rendering."""

    index: int
    outcome: ImportOutcome
    label: str | None = None
    matched_artists: tuple[ArtistMatch, ...] = ()
    matched_venue: VenueMatch | None = None
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportResultEntry:
    index: int
    outcome: ImportOutcome
    message: str
    matched_artists: tuple[ArtistMatch, ...] = ()
    matched_venue: VenueMatch | None = None
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportSummary:
    total: int = 0
    imported: int = 0
    updated: int = 0
    duplicates: int = 0
    rejected: int = 0
    pending_review: int = 0
    errors: int = 0

    @property
    def can_import_all(self) -> bool:
        return self.rejected == 0 and self.errors == 0

    def as_dict(self) -> dict[str, int | bool]:
        return {
            "total": self.total,
            "imported": self.imported,
            "updated": self.updated,
            "duplicates": self.duplicates,
            "rejected": self.rejected,
            "pending_review": self.pending_review,
            "errors": self.errors,
            "can_import_all": self.can_import_all,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportReport:
    mode: ImportMode
    entries: tuple[ImportResultEntry, ...]
    summary: ImportSummary

    @property
    def messages(self) -> tuple[str, ...]:
        return tuple(entry.message for entry in self.entries)

    @property
    def can_import_all(self) -> bool:
        return self.summary.can_import_all

    def as_dict(self) -> dict[str, object]:
        """JSON-ready representation for CLI output."""

        return {
            "mode": self.mode.value,
            "summary": self.summary.as_dict(),
            "entries": [_entry_as_dict(entry) for entry in self.entries],
        }


def render_message(outcome: ImportOutcome, label: str | None, *, mode: ImportMode) -> str:
    """Derive the legacy prefixed status line from a classified outcome."""

    commit_prefix, preview_prefix = _PREFIXES[outcome.kind]
    prefix = preview_prefix if mode is ImportMode.PREVIEW else commit_prefix
    subject = label or "record"

    if isinstance(outcome, Imported):
        return f"{prefix}: {subject}"
    if isinstance(outcome, Updated):
        return f"{prefix}: {subject} (show #{outcome.show_id})"
    if isinstance(outcome, Duplicate):
        return f"{prefix}: {subject} already exists as show #{outcome.existing_show_id}"
    if isinstance(outcome, FlaggedForReview):
        return f"{prefix}: {subject} ({outcome.reason})"
    if isinstance(outcome, Rejected):
        return f"{prefix}: {subject} {outcome.reason}"
    if outcome.skipped:
        return f"{SKIP_PREFIX}: {outcome.reason}"
    if label is None:
        return f"{prefix}: {outcome.reason}"
    return f"{prefix}: {label}: {outcome.reason}"


def build_entry(result: RecordResult, *, mode: ImportMode) -> ImportResultEntry:
    return ImportResultEntry(
        index=result.index,
        outcome=result.outcome,
        message=render_message(result.outcome, result.label, mode=mode),
        matched_artists=result.matched_artists,
        matched_venue=result.matched_venue,
        warnings=result.warnings,
    )


def aggregate(entries: Iterable[ImportResultEntry], *, mode: ImportMode) -> ImportReport:
    """Tally ``entries`` (already in input order) into an ``ImportReport``."""

    ordered = tuple(entries)
    counts = Counter(entry.outcome.kind for entry in ordered)
    summary = ImportSummary(
        total=len(ordered),
        imported=counts[OutcomeKind.IMPORTED],
        updated=counts[OutcomeKind.UPDATED],
        duplicates=counts[OutcomeKind.DUPLICATE],
        rejected=counts[OutcomeKind.REJECTED],
        pending_review=counts[OutcomeKind.FLAGGED_FOR_REVIEW],
        errors=counts[OutcomeKind.ERROR],
    )
    return ImportReport(mode=mode, entries=ordered, summary=summary)


def _match_as_dict(name: str, result: MatchResult) -> dict[str, object]:
    payload: dict[str, object] = {"name": name, "status": result.status.value}
    if isinstance(result, Matched):
        payload["entity_id"] = result.entity_id
    elif isinstance(result, Suggested):
        payload["candidates"] = [
            {"entity_id": candidate.entity_id, "name": candidate.name, "score": candidate.score}
            for candidate in result.candidates
        ]
    return payload


def _entry_as_dict(entry: ImportResultEntry) -> dict[str, object]:
    venue = entry.matched_venue
    return {
        "index": entry.index,
        "outcome": entry.outcome.kind.value,
        "message": entry.message,
        "warnings": list(entry.warnings),
        "matched_artists": [
            _match_as_dict(match.ref.name, match.result) for match in entry.matched_artists
        ],
        "matched_venue": _match_as_dict(venue.ref.name, venue.result) if venue else None,
    }

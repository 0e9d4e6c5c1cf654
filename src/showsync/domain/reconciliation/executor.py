"""Run the per-record reconciliation pipeline in preview or commit mode.

Every record walks ``received -> validated -> matched -> {duplicate | rejected |
ready} -> finished``. Both modes run the same decision code; only the catalog
writer differs. The preview writer hands out placeholder ids, and the commit
writer goes through the repositories and commits once per record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from showsync.domain.model import (
    Artist,
    Show,
    ShowArtist,
    ShowSnapshot,
    ShowSource,
    ShowStatus,
    Venue,
)

from .conflicts import ArtistMatch, ConflictHint, VenueMatch, advisory_warnings, detect
from .errors import ParseError, PersistenceError, ValidationError
from .events import OutcomeEvent
from .ledger import BatchLedger, LedgerArtist, LedgerStage, LedgerVenue
from .match import EntityMatcher, Matched
from .outcomes import (
    Duplicate,
    Error,
    FlaggedForReview,
    ImportMode,
    Imported,
    Rejected,
    Updated,
)
from .report import RecordResult, build_entry

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from datetime import date

    from showsync.domain.model import SetType
    from showsync.domain.ports import CatalogRepositories, CatalogUnitOfWork

    from .events import OutcomeChannel
    from .normalize import NormalizeRawRecord, RawInput
    from .outcomes import ImportOutcome
    from .records import ArtistRef, ShowRecord, SourceMetadata, VenueRef
    from .report import ImportResultEntry


log = getLogger(__name__)

type UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


class RecordStage(StrEnum):
    RECEIVED = "received"
    VALIDATED = "validated"
    MATCHED = "matched"
    DUPLICATE = "duplicate"
    REJECTED = "rejected"
    READY = "ready"
    FINISHED = "finished"


@dataclass(frozen=True, slots=True, kw_only=True)
class LineupEntry:
    ref: ArtistRef
    artist_id: int
    set_type: SetType


class CatalogWriter(Protocol):
    """Side-effecting half of the pipeline, swapped per mode."""

    def create_artist(self, ref: ArtistRef) -> int: ...

    def create_venue(self, ref: VenueRef, *, verified: bool) -> int: ...

    def create_show(
        self,
        record: ShowRecord,
        *,
        lineup: Sequence[LineupEntry],
        venue_ids: Sequence[int],
        status: ShowStatus,
        duplicate_of_show_id: int | None,
    ) -> int: ...

    def update_show(
        self,
        show_id: int,
        record: ShowRecord,
        *,
        lineup: Sequence[LineupEntry],
        venue_ids: Sequence[int],
    ) -> None: ...

    def finish(self) -> None: ...

    def abandon(self) -> None: ...


@dataclass(slots=True)
class PreviewWriter:
    """Assign placeholder ids and touch nothing."""

    ledger: BatchLedger

    def create_artist(self, ref: ArtistRef) -> int:
        _ = ref
        return self.ledger.next_placeholder()

    def create_venue(self, ref: VenueRef, *, verified: bool) -> int:
        _ = ref, verified
        return self.ledger.next_placeholder()

    def create_show(
        self,
        record: ShowRecord,
        *,
        lineup: Sequence[LineupEntry],
        venue_ids: Sequence[int],
        status: ShowStatus,
        duplicate_of_show_id: int | None,
    ) -> int:
        _ = record, lineup, venue_ids, status, duplicate_of_show_id
        return self.ledger.next_placeholder()

    def update_show(
        self,
        show_id: int,
        record: ShowRecord,
        *,
        lineup: Sequence[LineupEntry],
        venue_ids: Sequence[int],
    ) -> None:
        _ = show_id, record, lineup, venue_ids

    def finish(self) -> None:
        return None

    def abandon(self) -> None:
        return None


def _show_fields(record: ShowRecord) -> dict[str, object]:
    source = record.source
    return {
        "title": record.title,
        "event_date": record.event_date,
        "start_time": record.start_time,
        "city": record.city,
        "state": record.state,
        "price": record.price,
        "age_requirement": record.age_requirement,
        "description": record.description,
        "is_sold_out": record.is_sold_out,
        "is_cancelled": record.is_cancelled,
        "source": ShowSource.DISCOVERY if source else ShowSource.USER,
        "source_origin": source.origin if source else None,
        "source_event_id": source.event_id if source else None,
        "scraped_at": source.scraped_at if source else None,
        "ticket_url": source.ticket_url if source else None,
        "image_url": source.image_url if source else None,
    }


@dataclass(slots=True)
class CommitWriter:
    """Write through the unit of work, committing once per record."""

    unit_of_work: CatalogUnitOfWork

    @property
    def repositories(self) -> CatalogRepositories:
        return self.unit_of_work.repositories

    def create_artist(self, ref: ArtistRef) -> int:
        artist = Artist(name=ref.name, city=ref.city, state=ref.state, social=ref.social)
        self.repositories.artists.add(artist)
        return artist.require_id()

    def create_venue(self, ref: VenueRef, *, verified: bool) -> int:
        venue = Venue(
            name=ref.name,
            city=ref.city,
            state=ref.state,
            address=ref.address,
            zipcode=ref.zipcode,
            verified=verified,
            social=ref.social,
        )
        self.repositories.venues.add(venue)
        return venue.require_id()

    def create_show(
        self,
        record: ShowRecord,
        *,
        lineup: Sequence[LineupEntry],
        venue_ids: Sequence[int],
        status: ShowStatus,
        duplicate_of_show_id: int | None,
    ) -> int:
        show = Show(
            status=status,
            duplicate_of_show_id=duplicate_of_show_id,
            **_show_fields(record),  # pyright: ignore[reportArgumentType]
        )
        show.replace_lineup(self._lineup(lineup))
        show.replace_venues(self._venues(venue_ids))
        self.repositories.shows.add(show)
        return show.require_id()

    def update_show(
        self,
        show_id: int,
        record: ShowRecord,
        *,
        lineup: Sequence[LineupEntry],
        venue_ids: Sequence[int],
    ) -> None:
        show = self.repositories.shows.get(show_id)
        if show is None:
            raise PersistenceError(f"Show #{show_id} no longer exists")
        for name, value in _show_fields(record).items():
            setattr(show, name, value)
        show.replace_lineup(self._lineup(lineup))
        show.replace_venues(self._venues(venue_ids))
        self.repositories.shows.update(show)

    def finish(self) -> None:
        self.unit_of_work.commit()

    def abandon(self) -> None:
        self.unit_of_work.rollback()

    def _lineup(self, lineup: Iterable[LineupEntry]) -> list[ShowArtist]:
        entries: list[ShowArtist] = []
        for entry in lineup:
            artist = self.repositories.artists.get(entry.artist_id)
            if artist is None:
                raise PersistenceError(f"Artist #{entry.artist_id} no longer exists")
            entries.append(
                ShowArtist(artist=artist, position=entry.ref.position, set_type=entry.set_type)
            )
        return entries

    def _venues(self, venue_ids: Iterable[int]) -> list[Venue]:
        venues: list[Venue] = []
        for venue_id in venue_ids:
            venue = self.repositories.venues.get(venue_id)
            if venue is None:
                raise PersistenceError(f"Venue #{venue_id} no longer exists")
            venues.append(venue)
        return venues


@dataclass(slots=True, kw_only=True)
class _Batch:
    mode: ImportMode
    privileged: bool
    repositories: CatalogRepositories
    ledger: BatchLedger
    matcher: EntityMatcher
    writer: CatalogWriter


def initial_status(
    record: ShowRecord,
    *,
    privileged: bool,
    venues_verified: bool,
    flagged: bool,
) -> ShowStatus:
    """Status for a newly created show."""

    if flagged:
        return ShowStatus.PENDING
    if privileged:
        return record.status or ShowStatus.APPROVED
    return ShowStatus.APPROVED if venues_verified else ShowStatus.PENDING


@dataclass(slots=True, kw_only=True)
class ReconciliationExecutor:
    normalize: NormalizeRawRecord
    unit_of_work_factory: UnitOfWorkFactory
    channel: OutcomeChannel | None = None
    suggestion_limit: int = 3
    suggestion_cutoff: float = 80.0
    _stage_log: list[tuple[int, RecordStage]] = field(default_factory=list, init=False, repr=False)

    def run(
        self,
        records: Iterable[RawInput],
        *,
        mode: ImportMode,
        privileged: bool = False,
    ) -> list[ImportResultEntry]:
        """Process ``records`` in order and return one entry per record."""

        raw_records = list(records)
        log.info(
            "Starting %s of %d record(s): privileged=%s",
            mode.value,
            len(raw_records),
            privileged,
        )
        self._stage_log.clear()
        entries: list[ImportResultEntry] = []

        with self.unit_of_work_factory() as unit_of_work:
            repositories = unit_of_work.repositories
            ledger = BatchLedger()
            batch = _Batch(
                mode=mode,
                privileged=privileged,
                repositories=repositories,
                ledger=ledger,
                matcher=EntityMatcher(
                    artists=repositories.artists,
                    venues=repositories.venues,
                    ledger=ledger,
                    suggestion_limit=self.suggestion_limit,
                    suggestion_cutoff=self.suggestion_cutoff,
                ),
                writer=(
                    PreviewWriter(ledger)
                    if mode is ImportMode.PREVIEW
                    else CommitWriter(unit_of_work)
                ),
            )
            for index, raw in enumerate(raw_records):
                self._advance(index, RecordStage.RECEIVED)
                result = self._process(index, raw, batch)
                self._advance(index, RecordStage.FINISHED)
                entry = build_entry(result, mode=mode)
                log.debug("Record %d: %s", index, entry.message)
                entries.append(entry)
                if self.channel is not None:
                    self.channel.publish(OutcomeEvent(mode=mode, index=index, entry=entry))

            if mode is ImportMode.PREVIEW:
                unit_of_work.rollback()

        log.info("Finished %s of %d record(s)", mode.value, len(entries))
        return entries

    @property
    def stage_log(self) -> tuple[tuple[int, RecordStage], ...]:
        """Stage transitions of the most recent run, for diagnostics."""

        return tuple(self._stage_log)

    def _advance(self, index: int, stage: RecordStage) -> None:
        self._stage_log.append((index, stage))
        log.debug("Record %d -> %s", index, stage.value)

    def _process(self, index: int, raw: RawInput, batch: _Batch) -> RecordResult:
        try:
            record = self.normalize(raw)
        except ValidationError as exc:
            log.info("Skipping record %d: %s", index, exc)
            return RecordResult(index=index, outcome=Error(reason=str(exc), skipped=True))
        except ParseError as exc:
            log.info("Could not parse record %d: %s", index, exc)
            return RecordResult(index=index, outcome=Error(reason=str(exc)))
        self._advance(index, RecordStage.VALIDATED)

        artist_matches = tuple(
            ArtistMatch(ref=ref, result=batch.matcher.match_artist(ref)) for ref in record.artists
        )
        venue_matches = tuple(
            VenueMatch(ref=ref, result=batch.matcher.match_venue(ref)) for ref in record.venues
        )
        self._advance(index, RecordStage.MATCHED)

        headliner = record.headliner
        headliner_match = next(
            (match.result for match in artist_matches if match.ref is headliner),
            None,
        )
        primary_venue = venue_matches[0] if venue_matches else None

        def result(outcome: ImportOutcome, warnings: Sequence[str] = ()) -> RecordResult:
            return RecordResult(
                index=index,
                outcome=outcome,
                label=record.label,
                matched_artists=artist_matches,
                matched_venue=primary_venue,
                warnings=tuple(warnings),
            )

        if record.source is not None:
            existing = self._find_by_source(record.source, batch)
            if existing is not None:
                self._advance(index, RecordStage.READY)
                warnings = advisory_warnings(artist_matches, venue_matches)
                outcome = self._save(
                    index,
                    record,
                    artist_matches,
                    venue_matches,
                    batch,
                    existing=existing,
                )
                return result(outcome, warnings)

        venue_result = primary_venue.result if primary_venue is not None else None
        existing_shows: list[ShowSnapshot] = []
        if isinstance(venue_result, Matched):
            existing_shows = self._shows_at(venue_result.entity_id, record.event_date, batch)
        report = detect(
            record,
            headliner_match,
            venue_result,
            existing_shows,
            artist_matches=artist_matches,
            venue_matches=venue_matches,
        )

        if report.hint is ConflictHint.ERROR:
            return result(Error(reason=report.reason or "Record could not be classified"))
        if report.hint is ConflictHint.DUPLICATE and report.conflicting_show is not None:
            self._advance(index, RecordStage.DUPLICATE)
            return result(
                Duplicate(existing_show_id=report.conflicting_show.show_id),
                report.warnings,
            )
        if report.hint is ConflictHint.REJECTED:
            self._advance(index, RecordStage.REJECTED)
            rejected = report.conflicting_show
            return result(
                Rejected(
                    reason=report.reason or "matches a previously rejected show",
                    rejected_show_id=rejected.show_id if rejected else None,
                ),
                report.warnings,
            )

        self._advance(index, RecordStage.READY)
        flagged_against = (
            report.conflicting_show if report.hint is ConflictHint.FLAG_FOR_REVIEW else None
        )
        outcome = self._save(
            index,
            record,
            artist_matches,
            venue_matches,
            batch,
            duplicate_of=flagged_against,
            review_reason=report.reason,
        )
        return result(outcome, report.warnings)

    def _find_by_source(self, source: SourceMetadata, batch: _Batch) -> ShowSnapshot | None:
        snapshot = batch.ledger.show_by_source(source.origin, source.event_id)
        if snapshot is not None:
            return snapshot
        show = batch.repositories.shows.find_by_source_id(source.origin, source.event_id)
        return show.snapshot() if show is not None else None

    def _shows_at(self, venue_id: int, day: date, batch: _Batch) -> list[ShowSnapshot]:
        """Catalog shows at the venue that day, overlaid with this batch's shows.

        Shows touched by the batch come from the ledger in both modes, after the
        untouched catalog shows, so the order does not depend on the mode.
        """

        touched = batch.ledger.show_ids
        catalog = [
            show.snapshot()
            for show in batch.repositories.shows.list_by_venue_and_date(venue_id, day)
            if show.id not in touched
        ]
        catalog.sort(key=lambda snapshot: snapshot.show_id)
        return catalog + batch.ledger.shows_at(venue_id, day)

    def _save(
        self,
        index: int,
        record: ShowRecord,
        artist_matches: Sequence[ArtistMatch],
        venue_matches: Sequence[VenueMatch],
        batch: _Batch,
        *,
        existing: ShowSnapshot | None = None,
        duplicate_of: ShowSnapshot | None = None,
        review_reason: str | None = None,
    ) -> ImportOutcome:
        stage = LedgerStage()
        try:
            show_id = self._write(
                record,
                artist_matches,
                venue_matches,
                batch,
                stage,
                existing=existing,
                duplicate_of=duplicate_of,
            )
            batch.writer.finish()
        except PersistenceError as exc:
            log.exception("Failed to save record %d (%s)", index, record.label)
            batch.writer.abandon()
            return Error(reason=f"Failed to save show: {exc}")

        batch.ledger.merge(stage)
        if existing is not None:
            return Updated(show_id=show_id)
        if duplicate_of is not None:
            return FlaggedForReview(
                reason=review_reason or f"possible duplicate of show #{duplicate_of.show_id}",
                show_id=show_id,
                duplicate_of_show_id=duplicate_of.show_id,
            )
        return Imported(show_id=show_id)

    def _write(
        self,
        record: ShowRecord,
        artist_matches: Sequence[ArtistMatch],
        venue_matches: Sequence[VenueMatch],
        batch: _Batch,
        stage: LedgerStage,
        *,
        existing: ShowSnapshot | None,
        duplicate_of: ShowSnapshot | None,
    ) -> int:
        # artists before venues before the show
        lineup = [
            LineupEntry(
                ref=match.ref,
                artist_id=self._resolve_artist(match, batch, stage),
                set_type=record.effective_set_type(match.ref),
            )
            for match in artist_matches
        ]
        venues = [self._resolve_venue(match, batch, stage) for match in venue_matches]
        venue_ids = [venue.entity_id for venue in venues]

        if existing is not None:
            batch.writer.update_show(existing.show_id, record, lineup=lineup, venue_ids=venue_ids)
            show_id = existing.show_id
            status = existing.status
        else:
            status = initial_status(
                record,
                privileged=batch.privileged,
                venues_verified=all(venue.verified for venue in venues),
                flagged=duplicate_of is not None,
            )
            show_id = batch.writer.create_show(
                record,
                lineup=lineup,
                venue_ids=venue_ids,
                status=status,
                duplicate_of_show_id=duplicate_of.show_id if duplicate_of else None,
            )

        headliner = record.headliner
        stage.shows.append(
            ShowSnapshot(
                show_id=show_id,
                event_date=record.event_date,
                status=status,
                headliner_id=next(
                    (entry.artist_id for entry in lineup if entry.ref is headliner),
                    None,
                ),
                venue_ids=tuple(venue_ids),
                title=record.title,
                source_origin=record.source.origin if record.source else None,
                source_event_id=record.source.event_id if record.source else None,
            )
        )
        return show_id

    def _resolve_artist(self, match: ArtistMatch, batch: _Batch, stage: LedgerStage) -> int:
        if isinstance(match.result, Matched):
            return match.result.entity_id
        staged = batch.ledger.artist(match.ref.key, stage)
        if staged is not None:
            return staged.entity_id
        artist_id = batch.writer.create_artist(match.ref)
        stage.artists[match.ref.key] = LedgerArtist(entity_id=artist_id, name=match.ref.name)
        return artist_id

    def _resolve_venue(self, match: VenueMatch, batch: _Batch, stage: LedgerStage) -> LedgerVenue:
        staged = batch.ledger.venue(match.ref.key, stage)
        if staged is not None:
            return staged
        if isinstance(match.result, Matched):
            venue = batch.repositories.venues.get(match.result.entity_id)
            return LedgerVenue(
                entity_id=match.result.entity_id,
                name=match.result.name,
                city=match.ref.city,
                verified=venue.verified if venue is not None else False,
            )
        venue_id = batch.writer.create_venue(match.ref, verified=batch.privileged)
        entry = LedgerVenue(
            entity_id=venue_id,
            name=match.ref.name,
            city=match.ref.city,
            verified=batch.privileged,
        )
        stage.venues[match.ref.key] = entry
        return entry

"""Preview and commit against a real SQLite catalog."""

from __future__ import annotations

import re
from datetime import date
from typing import TYPE_CHECKING

import pytest

from showsync.adapters.normalizer import ShowRecordNormalizer
from showsync.domain.model import Artist, SetType, Show, ShowSource, ShowStatus, Venue
from showsync.domain.reconciliation import ImportEngine, ImportReport, OutcomeKind
from tests.support.records import discovery_event, export_doc

if TYPE_CHECKING:
    from collections.abc import Callable

    from showsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork
    from showsync.domain.reconciliation import RawInput

    type UowFactory = Callable[[], SqlAlchemyCatalogUnitOfWork]


def _seed(factory: UowFactory) -> None:
    with factory() as uow:
        headliners = Artist(name="The Headliners")
        crescent = Venue(name="Crescent Ballroom", city="Phoenix", state="AZ", verified=True)
        uow.repositories.artists.add(headliners)
        uow.repositories.artists.add(Artist(name="The Headlines"))
        uow.repositories.venues.add(crescent)
        approved = Show(event_date=date(2025, 3, 1), status=ShowStatus.APPROVED)
        approved.add_artist(headliners, position=0, set_type=SetType.HEADLINER)
        approved.add_venue(crescent)
        uow.repositories.shows.add(approved)
        rejected = Show(
            event_date=date(2025, 3, 8),
            status=ShowStatus.REJECTED,
            source=ShowSource.DISCOVERY,
            source_origin="crescent-ballroom",
            source_event_id="old-evt",
        )
        rejected.add_artist(headliners, position=0, set_type=SetType.HEADLINER)
        rejected.add_venue(crescent)
        uow.repositories.shows.add(rejected)
        uow.commit()


SIMILAR_HEADLINER = discovery_event(
    "evt-3", "The Headliner", "2025-03-15", venue_slug="crescent-ballroom", venue=None
)

BATCH: list[RawInput] = [
    export_doc("The Headliners", "Crescent Ballroom"),
    export_doc("Night Owls", "The Rebel Lounge", openers=["Early Birds"]),
    export_doc("Night Owls", "The Rebel Lounge", openers=["Early Birds"]),
    export_doc("Early Birds", "The Rebel Lounge", event_date="2025-03-02"),
    discovery_event(
        "evt-1",
        "Night Owls, Early Birds",
        "2025-03-01",
        venue_slug="the-rebel-lounge",
        venue="The Rebel Lounge",
        city="Phoenix",
        state="AZ",
    ),
    discovery_event(
        "evt-2",
        "Desert Rats",
        "2025-03-08",
        venue_slug="crescent-ballroom",
        venue="Crescent Ballroom",
    ),
    SIMILAR_HEADLINER,
    SIMILAR_HEADLINER,
    "---\nbroken",
]


def _masked(report: ImportReport) -> list[tuple[OutcomeKind, str, tuple[str, ...]]]:
    return [
        (
            entry.outcome.kind,
            re.sub(r"#-?\d+", "#N", entry.message.partition(": ")[2]),
            entry.warnings,
        )
        for entry in report.entries
    ]


def _engine(factory: UowFactory) -> ImportEngine:
    return ImportEngine(normalize=ShowRecordNormalizer(), unit_of_work_factory=factory)


def test_preview_and_commit_classify_identically(sqlite_unit_of_work: UowFactory) -> None:
    _seed(sqlite_unit_of_work)
    engine = _engine(sqlite_unit_of_work)

    preview = engine.preview(BATCH)
    commit = engine.commit(BATCH, privileged=False)

    assert _masked(preview) == _masked(commit)
    assert [entry.outcome.kind for entry in commit.entries] == [
        OutcomeKind.DUPLICATE,
        OutcomeKind.IMPORTED,
        OutcomeKind.DUPLICATE,
        OutcomeKind.IMPORTED,
        OutcomeKind.FLAGGED_FOR_REVIEW,
        OutcomeKind.REJECTED,
        OutcomeKind.IMPORTED,
        OutcomeKind.UPDATED,
        OutcomeKind.ERROR,
    ]
    assert commit.entries[6].warnings[0] == (
        "Artist 'The Headliner' is similar to existing: The Headliners, The Headlines"
    )


def test_commit_creates_shared_entities_once(sqlite_unit_of_work: UowFactory) -> None:
    _seed(sqlite_unit_of_work)

    _engine(sqlite_unit_of_work).commit(BATCH, privileged=False)

    with sqlite_unit_of_work() as uow:
        artist_names = [artist.name for artist in uow.repositories.artists.list_all()]
        venue_names = [venue.name for venue in uow.repositories.venues.list_all()]
        evt_3 = uow.repositories.shows.find_by_source_id("crescent-ballroom", "evt-3")
        flagged = uow.repositories.shows.find_by_source_id("the-rebel-lounge", "evt-1")

        assert artist_names == [
            "The Headliners",
            "The Headlines",
            "Night Owls",
            "Early Birds",
            "The Headliner",
        ]
        assert venue_names == ["Crescent Ballroom", "The Rebel Lounge"]
        assert evt_3 is not None
        assert evt_3.status is ShowStatus.APPROVED
        assert flagged is not None
        assert flagged.status is ShowStatus.PENDING
        assert flagged.duplicate_of_show_id is not None


def test_commit_is_idempotent(sqlite_unit_of_work: UowFactory) -> None:
    _seed(sqlite_unit_of_work)
    engine = _engine(sqlite_unit_of_work)
    engine.commit(BATCH, privileged=False)

    again = engine.commit(BATCH, privileged=False)

    assert [entry.outcome.kind for entry in again.entries] == [
        OutcomeKind.DUPLICATE,
        OutcomeKind.DUPLICATE,
        OutcomeKind.DUPLICATE,
        OutcomeKind.DUPLICATE,
        OutcomeKind.UPDATED,
        OutcomeKind.REJECTED,
        OutcomeKind.UPDATED,
        OutcomeKind.UPDATED,
        OutcomeKind.ERROR,
    ]
    with sqlite_unit_of_work() as uow:
        assert len(uow.repositories.artists.list_all()) == 5


STATUS_BATCH: list[RawInput] = [
    export_doc("Night Owls", "Crescent Ballroom", "2025-03-20", status="private"),
    export_doc("Night Owls", "Crescent Ballroom", "2025-03-20", status="private"),
    export_doc("Crows", "Crescent Ballroom", "2025-03-20", status="rejected"),
    discovery_event(
        "evt-20", "Someone Else", "2025-03-20", venue_slug="crescent-ballroom", venue=None
    ),
]


@pytest.mark.parametrize(
    ("privileged", "expected"),
    [
        (
            False,
            [
                OutcomeKind.IMPORTED,
                OutcomeKind.DUPLICATE,
                OutcomeKind.IMPORTED,
                OutcomeKind.IMPORTED,
            ],
        ),
        (
            True,
            [
                OutcomeKind.IMPORTED,
                OutcomeKind.IMPORTED,
                OutcomeKind.IMPORTED,
                OutcomeKind.REJECTED,
            ],
        ),
    ],
)
def test_exported_status_is_honoured_by_preview_and_commit(
    sqlite_unit_of_work: UowFactory,
    *,
    privileged: bool,
    expected: list[OutcomeKind],
) -> None:
    _seed(sqlite_unit_of_work)
    engine = _engine(sqlite_unit_of_work)

    preview = engine.preview(STATUS_BATCH, privileged=privileged)
    commit = engine.commit(STATUS_BATCH, privileged=privileged)

    assert _masked(preview) == _masked(commit)
    assert [entry.outcome.kind for entry in commit.entries] == expected

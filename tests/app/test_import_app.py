from __future__ import annotations

import json
from datetime import UTC, datetime, time, timedelta, timezone
from typing import TYPE_CHECKING

import pytest

from showsync.adapters.export import parse_export_document
from showsync.app import commit_import, export_show, preview_import
from showsync.domain.reconciliation import (
    Imported,
    OutcomeChannel,
    OutcomeEvent,
    OutcomeKind,
)
from tests.support.records import discovery_event, export_doc

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from showsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork

    type UowFactory = Callable[[], SqlAlchemyCatalogUnitOfWork]


def _write_batch(directory: Path) -> list[Path]:
    document = directory / "show-2025-03-01-the-headliners.md"
    document.write_text(export_doc(openers=["Early Birds"]), encoding="utf-8")
    events = directory / "valley-bar.json"
    events.write_text(
        json.dumps([discovery_event("evt-7", "Night Owls", "2025-03-02")]),
        encoding="utf-8",
    )
    return [document, events]


def test_preview_then_commit(tmp_path: Path, sqlite_unit_of_work: UowFactory) -> None:
    paths = _write_batch(tmp_path)

    preview = preview_import(paths, unit_of_work_factory=sqlite_unit_of_work)
    committed = commit_import(paths, unit_of_work_factory=sqlite_unit_of_work)
    repeated = preview_import(paths, unit_of_work_factory=sqlite_unit_of_work)

    assert [entry.outcome.kind for entry in preview.entries] == [
        OutcomeKind.IMPORTED,
        OutcomeKind.IMPORTED,
    ]
    assert [entry.outcome.kind for entry in committed.entries] == [
        OutcomeKind.IMPORTED,
        OutcomeKind.IMPORTED,
    ]
    assert [entry.outcome.kind for entry in repeated.entries] == [
        OutcomeKind.DUPLICATE,
        OutcomeKind.UPDATED,
    ]


def test_commit_publishes_events(tmp_path: Path, sqlite_unit_of_work: UowFactory) -> None:
    channel = OutcomeChannel()
    events: list[OutcomeEvent] = []
    channel.subscribe(events.append)

    commit_import(
        _write_batch(tmp_path),
        privileged=True,
        unit_of_work_factory=sqlite_unit_of_work,
        channel=channel,
    )

    assert [event.index for event in events] == [0, 1]


def test_export_show_writes_document(tmp_path: Path, sqlite_unit_of_work: UowFactory) -> None:
    source = tmp_path / "incoming.md"
    source.write_text(
        export_doc(openers=["Early Birds"], title="Spring Tour", description="Doors at seven."),
        encoding="utf-8",
    )
    report = commit_import([source], unit_of_work_factory=sqlite_unit_of_work)
    outcome = report.entries[0].outcome
    assert isinstance(outcome, Imported)
    exported_at = datetime(2025, 2, 10, 18, 30, tzinfo=UTC)

    path = export_show(
        outcome.show_id,
        output_dir=tmp_path / "exports",
        unit_of_work_factory=sqlite_unit_of_work,
        exported_at=exported_at,
    )

    assert path == tmp_path / "exports" / "show-2025-03-01-spring-tour.md"
    record = parse_export_document(path.read_text(encoding="utf-8"))
    assert record.title == "Spring Tour"
    assert record.description == "Doors at seven."
    assert [artist.name for artist in record.artists] == ["The Headliners", "Early Birds"]
    assert record.export is not None
    assert record.export.exported_at == exported_at


def test_export_missing_show(tmp_path: Path, sqlite_unit_of_work: UowFactory) -> None:
    with pytest.raises(LookupError, match="Show #404 does not exist"):
        export_show(404, output_dir=tmp_path, unit_of_work_factory=sqlite_unit_of_work)

def test_exported_show_reimports_as_duplicate(
    tmp_path: Path, sqlite_unit_of_work: UowFactory
) -> None:
    source = tmp_path / "incoming.json"
    source.write_text(json.dumps([discovery_event(title="The Headliners, Early Birds")]))
    report = commit_import([source], unit_of_work_factory=sqlite_unit_of_work)
    outcome = report.entries[0].outcome
    assert isinstance(outcome, Imported)

    exported = export_show(
        outcome.show_id,
        output_dir=tmp_path / "exports",
        unit_of_work_factory=sqlite_unit_of_work,
    )
    reimport = commit_import([exported], unit_of_work_factory=sqlite_unit_of_work)

    assert reimport.entries[0].outcome.kind is OutcomeKind.DUPLICATE
    assert reimport.summary.duplicates == 1


def test_export_keeps_start_time_offset(tmp_path: Path, sqlite_unit_of_work: UowFactory) -> None:
    source = tmp_path / "incoming.md"
    source.write_text(export_doc(event_date="2025-03-01T20:00:00-07:00"), encoding="utf-8")
    report = commit_import([source], unit_of_work_factory=sqlite_unit_of_work)
    outcome = report.entries[0].outcome
    assert isinstance(outcome, Imported)

    path = export_show(
        outcome.show_id,
        output_dir=tmp_path / "exports",
        unit_of_work_factory=sqlite_unit_of_work,
    )

    record = parse_export_document(path.read_text(encoding="utf-8"))
    assert record.event_date.isoformat() == "2025-03-01"
    assert record.start_time == time(20, 0, tzinfo=timezone(timedelta(hours=-7)))
    assert "2025-03-01T20:00:00-07:00" in path.read_text(encoding="utf-8")

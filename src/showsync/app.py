"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from showsync.adapters.export import (
    export_document_filename,
    record_from_show,
    render_export_document,
)
from showsync.adapters.files import load_all_records
from showsync.adapters.normalizer import ShowRecordNormalizer
from showsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from showsync.config import get_import_config, get_storage_config, get_venue_registry
from showsync.domain.ports import CatalogUnitOfWork
from showsync.domain.reconciliation import ImportEngine, OutcomeChannel

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from showsync.domain.reconciliation import ImportReport, NormalizeRawRecord

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


log = getLogger(__name__)


def _ensure_started(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyCatalogUnitOfWork


def build_engine(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    normalize: NormalizeRawRecord | None = None,
    channel: OutcomeChannel | None = None,
) -> ImportEngine:
    """Wire the import engine to the configured adapters."""

    config = get_import_config()
    return ImportEngine(
        normalize=normalize or ShowRecordNormalizer(get_venue_registry()),
        unit_of_work_factory=_ensure_started(unit_of_work_factory),
        channel=channel or OutcomeChannel(),
        suggestion_limit=config.suggestion_limit,
        suggestion_cutoff=config.suggestion_cutoff,
    )


def preview_import(
    paths: Iterable[Path],
    *,
    privileged: bool = False,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    channel: OutcomeChannel | None = None,
) -> ImportReport:
    """Classify the records in ``paths`` without touching the catalog."""

    records = load_all_records(paths)
    engine = build_engine(unit_of_work_factory=unit_of_work_factory, channel=channel)
    log.info("Previewing %d record(s): privileged=%s", len(records), privileged)
    report = engine.preview(records, privileged=privileged)
    log.info("Preview finished: %s", report.summary.as_dict())
    return report


def commit_import(
    paths: Iterable[Path],
    *,
    privileged: bool = False,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    channel: OutcomeChannel | None = None,
) -> ImportReport:
    """Reconcile the records in ``paths`` into the catalog."""

    records = load_all_records(paths)
    engine = build_engine(unit_of_work_factory=unit_of_work_factory, channel=channel)
    log.info("Committing %d record(s): privileged=%s", len(records), privileged)
    report = engine.commit(records, privileged=privileged)
    log.info("Commit finished: %s", report.summary.as_dict())
    return report


def export_show(
    show_id: int,
    *,
    output_dir: Path | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    exported_at: datetime | None = None,
) -> Path:
    """Write the export document for a stored show and return its path."""

    effective_uow = _ensure_started(unit_of_work_factory)
    with effective_uow() as uow:
        show = uow.repositories.shows.get(show_id)
        if show is None:
            raise LookupError(f"Show #{show_id} does not exist")
        record = record_from_show(show, exported_at=exported_at or datetime.now(UTC))

    directory = output_dir or get_storage_config().exports_dir()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_document_filename(record)
    path.write_text(render_export_document(record), encoding="utf-8")
    log.info("Exported show #%s to %s", show_id, path)
    return path

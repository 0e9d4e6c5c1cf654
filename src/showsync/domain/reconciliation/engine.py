"""Public surface of the import engine.

The engine composes the executor and the aggregator but does not prescribe
concrete adapters; callers supply the normalizer and the unit-of-work factory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .events import OutcomeChannel
from .executor import ReconciliationExecutor
from .outcomes import ImportMode
from .report import aggregate

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .executor import UnitOfWorkFactory
    from .normalize import NormalizeRawRecord, RawInput
    from .report import ImportReport


@dataclass(slots=True, kw_only=True)
class ImportEngine:
    """Preview or commit batches of raw show records."""

    normalize: NormalizeRawRecord
    unit_of_work_factory: UnitOfWorkFactory
    channel: OutcomeChannel = field(default_factory=OutcomeChannel)
    suggestion_limit: int = 3
    suggestion_cutoff: float = 80.0

    def preview(
        self,
        records: Iterable[RawInput],
        *,
        privileged: bool = False,
    ) -> ImportReport:
        """Classify ``records`` exactly as ``commit`` with the same ``privileged`` would."""

        return self._run(records, mode=ImportMode.PREVIEW, privileged=privileged)

    def commit(self, records: Iterable[RawInput], *, privileged: bool) -> ImportReport:
        """Reconcile ``records`` into the catalog, one committed record at a time."""

        return self._run(records, mode=ImportMode.COMMIT, privileged=privileged)

    def _run(
        self,
        records: Iterable[RawInput],
        *,
        mode: ImportMode,
        privileged: bool,
    ) -> ImportReport:
        executor = ReconciliationExecutor(
            normalize=self.normalize,
            unit_of_work_factory=self.unit_of_work_factory,
            channel=self.channel,
            suggestion_limit=self.suggestion_limit,
            suggestion_cutoff=self.suggestion_cutoff,
        )
        entries = executor.run(records, mode=mode, privileged=privileged)
        return aggregate(entries, mode=mode)

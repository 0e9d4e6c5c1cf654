"""Show import reconciliation.

Stages, leaves first: normalization contracts, entity matching, conflict
detection, execution in preview or commit mode, and aggregation into a report.
"""

from __future__ import annotations

from .conflicts import ArtistMatch, ConflictHint, ConflictReport, VenueMatch, detect
from .engine import ImportEngine
from .errors import ParseError, PersistenceError, RecordError, ValidationError
from .events import OutcomeChannel, OutcomeEvent
from .executor import ReconciliationExecutor, RecordStage
from .match import Candidate, EntityMatcher, Matched, MatchResult, MatchStatus, New, Suggested
from .normalize import NormalizeRawRecord, RawInput
from .outcomes import (
    Duplicate,
    Error,
    FlaggedForReview,
    ImportMode,
    ImportOutcome,
    Imported,
    OutcomeKind,
    Rejected,
    Updated,
)
from .records import ArtistRef, ExportMetadata, ShowRecord, SourceMetadata, VenueRef
from .report import ImportReport, ImportResultEntry, ImportSummary, aggregate, render_message

__all__ = [
    "ArtistMatch",
    "ArtistRef",
    "Candidate",
    "ConflictHint",
    "ConflictReport",
    "Duplicate",
    "EntityMatcher",
    "Error",
    "ExportMetadata",
    "FlaggedForReview",
    "ImportEngine",
    "ImportMode",
    "ImportOutcome",
    "ImportReport",
    "ImportResultEntry",
    "ImportSummary",
    "Imported",
    "MatchResult",
    "MatchStatus",
    "Matched",
    "New",
    "NormalizeRawRecord",
    "OutcomeChannel",
    "OutcomeEvent",
    "OutcomeKind",
    "ParseError",
    "PersistenceError",
    "RawInput",
    "ReconciliationExecutor",
    "RecordError",
    "RecordStage",
    "Rejected",
    "ShowRecord",
    "SourceMetadata",
    "Suggested",
    "Updated",
    "ValidationError",
    "VenueMatch",
    "VenueRef",
    "aggregate",
    "detect",
    "render_message",
]

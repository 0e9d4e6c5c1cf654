"""Per-record classifications produced by the executor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal


class ImportMode(StrEnum):
    PREVIEW = "preview"
    COMMIT = "commit"


class OutcomeKind(StrEnum):
    IMPORTED = "imported"
    UPDATED = "updated"
    DUPLICATE = "duplicate"
    REJECTED = "rejected"
    FLAGGED_FOR_REVIEW = "flagged_for_review"
    ERROR = "error"


@dataclass(frozen=True, slots=True, kw_only=True)
class Imported:
    """A new show was (or would be) created."""

    show_id: int
    kind: Literal[OutcomeKind.IMPORTED] = OutcomeKind.IMPORTED


@dataclass(frozen=True, slots=True, kw_only=True)
class Updated:
    """An existing discovered show was (or would be) refreshed."""

    show_id: int
    kind: Literal[OutcomeKind.UPDATED] = OutcomeKind.UPDATED


@dataclass(frozen=True, slots=True, kw_only=True)
class Duplicate:
    existing_show_id: int
    kind: Literal[OutcomeKind.DUPLICATE] = OutcomeKind.DUPLICATE


@dataclass(frozen=True, slots=True, kw_only=True)
class Rejected:
    reason: str
    rejected_show_id: int | None = None
    kind: Literal[OutcomeKind.REJECTED] = OutcomeKind.REJECTED


@dataclass(frozen=True, slots=True, kw_only=True)
class FlaggedForReview:
    """Show created as pending because it may duplicate ``duplicate_of_show_id``."""

    reason: str
    show_id: int
    duplicate_of_show_id: int | None = None
    kind: Literal[OutcomeKind.FLAGGED_FOR_REVIEW] = OutcomeKind.FLAGGED_FOR_REVIEW


@dataclass(frozen=True, slots=True, kw_only=True)
class Error:
    """Record could not be processed.

    ``skipped`` marks records excluded before matching because required content
    was missing.
    """

    reason: str
    skipped: bool = False
    kind: Literal[OutcomeKind.ERROR] = OutcomeKind.ERROR


type ImportOutcome = Imported | Updated | Duplicate | Rejected | FlaggedForReview | Error

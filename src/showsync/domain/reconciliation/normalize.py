"""Normalization contracts shared by every raw-input translator.

Translators for concrete input shapes live in ``showsync.adapters``; this module
holds the stage interface plus the value parsing and invariant checks they
all apply before a record may enter the pipeline.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Protocol

from .errors import ParseError, ValidationError

if TYPE_CHECKING:
    from .records import ShowRecord


type RawInput = str | Mapping[str, object]


class NormalizeRawRecord(Protocol):
    """Turn one raw input into a canonical ``ShowRecord``.

    Implementations raise ``ParseError`` or ``ValidationError`` and never
    touch the catalog.
    """

    def __call__(self, raw: RawInput) -> ShowRecord: ...


def clean_text(value: object) -> str | None:
    """Collapse whitespace; blanks become ``None``."""

    if value is None:
        return None
    text = " ".join(str(value).split())
    return text or None


def parse_event_date(value: object) -> tuple[date, time | None]:
    """Split a date or timestamp into its calendar date and wall-clock time.

    Offsets are kept on the returned time so a timestamp survives a round trip.
    """

    if isinstance(value, datetime):
        return value.date(), value.timetz()
    if isinstance(value, date):
        return value, None
    text = clean_text(value)
    if text is None:
        raise ParseError("Missing event date")
    if "T" not in text and " " not in text:
        try:
            return date.fromisoformat(text), None
        except ValueError as exc:
            raise ParseError(f"Invalid event date '{text}'") from exc
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ParseError(f"Invalid event date '{text}'") from exc
    return parsed.date(), parsed.timetz()


def format_event_date(day: date, start_time: time | None) -> str:
    if start_time is None:
        return day.isoformat()
    return datetime.combine(day, start_time).isoformat()


def ensure_record_invariants(record: ShowRecord) -> ShowRecord:
    """Reject records that cannot be reconciled and fill location defaults."""

    if not record.artists:
        raise ValidationError("No artists specified")
    if not record.venues:
        raise ValidationError("No venues specified")
    for artist in record.artists:
        if not artist.name.strip():
            raise ValidationError("Artist name is required")
    for venue in record.venues:
        if not venue.name.strip() or not venue.city.strip():
            raise ValidationError("Venue name and city are required")
    return record.with_location_defaults()

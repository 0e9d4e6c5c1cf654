"""Translate discovery scraper events into show records."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import time
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError as PydanticValidationError

from showsync.adapters.export.translator import describe_validation_error
from showsync.domain.model import SetType, name_key
from showsync.domain.reconciliation import ParseError, ValidationError
from showsync.domain.reconciliation.normalize import ensure_record_invariants, parse_event_date
from showsync.domain.reconciliation.records import (
    ArtistRef,
    ShowRecord,
    SourceMetadata,
    VenueRef,
)

from .schema import DiscoveredEvent

if TYPE_CHECKING:
    from showsync.config import VenueRegistry

log = getLogger(__name__)

_TIME_PATTERN = re.compile(
    r"^(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*(?P<period>[ap])\.?\s*m?\.?$",
    re.IGNORECASE,
)
_CLOCK_PATTERN = re.compile(r"^(?P<hour>\d{1,2}):(?P<minute>\d{2})$")
_PRICE_PATTERN = re.compile(r"\d+(?:\.\d+)?")
_TITLE_SEPARATORS: Final[tuple[str, ...]] = (" / ", " | ", " + ")
_AMPERSAND_MIN_LENGTH: Final[int] = 10
_NOON: Final[int] = 12
_HOURS_PER_DAY: Final[int] = 24
_MINUTES_PER_HOUR: Final[int] = 60


def _split_and_trim(value: str, separator: str) -> list[str]:
    return [part.strip() for part in value.split(separator) if part.strip()]


def split_title_artists(title: str) -> list[str]:
    """Guess the billed artists from an event title."""

    if "," in title:
        return _split_and_trim(title, ",")

    index = title.casefold().find(" with ")
    if index > 0:
        return [title[:index].strip(), *_split_and_trim(title[index + len(" with ") :], ",")]

    for separator in _TITLE_SEPARATORS:
        if separator in title:
            return _split_and_trim(title, separator)

    if " & " in title:
        parts = title.split(" & ")
        if len(parts) == 2 and all(len(part) > _AMPERSAND_MIN_LENGTH for part in parts):
            return _split_and_trim(title, " & ")

    stripped = title.strip()
    return [stripped] if stripped else []


def parse_show_time(value: str | None) -> time | None:
    """Parse times such as ``7:00 pm``, ``7pm`` or ``19:30``; unknown formats give ``None``."""

    if value is None:
        return None
    text = value.strip()
    match = _TIME_PATTERN.match(text)
    if match is not None:
        hour = int(match["hour"])
        minute = int(match["minute"] or 0)
        if not 1 <= hour <= _NOON or minute >= _MINUTES_PER_HOUR:
            return None
        is_pm = match["period"].lower() == "p"
        if is_pm and hour != _NOON:
            hour += _NOON
        elif not is_pm and hour == _NOON:
            hour = 0
        return time(hour, minute)
    match = _CLOCK_PATTERN.match(text)
    if match is not None:
        hour, minute = int(match["hour"]), int(match["minute"])
        if hour < _HOURS_PER_DAY and minute < _MINUTES_PER_HOUR:
            return time(hour, minute)
    log.debug("Ignoring unrecognised show time %r", value)
    return None


def parse_price(value: str | None) -> float | None:
    """First number in a free-text price; ``free`` is zero."""

    if value is None:
        return None
    text = value.replace(",", "")
    if "free" in text.casefold():
        return 0.0
    match = _PRICE_PATTERN.search(text)
    return float(match.group()) if match else None


def build_description(event: DiscoveredEvent) -> str | None:
    parts: list[str] = []
    if event.doors_time:
        parts.append(f"Doors: {event.doors_time}")
    if event.show_time:
        parts.append(f"Show: {event.show_time}")
    if event.ticket_url:
        parts.append(f"Tickets: {event.ticket_url}")
    return " | ".join(parts) or None


def _artist_refs(names: list[str]) -> tuple[ArtistRef, ...]:
    refs: list[ArtistRef] = []
    seen: set[str] = set()
    for name in names:
        key = name_key(name)
        if not key or key in seen:
            continue
        seen.add(key)
        refs.append(
            ArtistRef(
                name=" ".join(name.split()),
                position=len(refs),
                set_type=SetType.HEADLINER if not refs else SetType.OPENER,
            )
        )
    return tuple(refs)


@dataclass(slots=True)
class DiscoveryTranslator:
    """Turn one scraped event mapping into a ``ShowRecord``."""

    venues: VenueRegistry

    def __call__(self, raw: Mapping[str, object]) -> ShowRecord:
        try:
            event = DiscoveredEvent.model_validate(raw)
        except PydanticValidationError as exc:
            raise ParseError(f"Invalid discovery event: {describe_validation_error(exc)}") from exc

        if not event.event_id or not event.venue_slug or not event.date:
            raise ValidationError("Missing required fields")

        event_date, timestamp_time = parse_event_date(event.date)
        start_time = parse_show_time(event.show_time) or timestamp_time
        venue = self._venue(event, event.venue_slug)
        names = event.artists or split_title_artists(event.title or "")

        record = ShowRecord(
            event_date=event_date,
            start_time=start_time,
            artists=_artist_refs(names),
            venues=(venue,),
            title=event.title,
            city=event.city,
            state=event.state,
            price=parse_price(event.price),
            age_requirement=event.age_restriction,
            description=build_description(event),
            is_sold_out=event.is_sold_out,
            is_cancelled=event.is_cancelled,
            source=SourceMetadata(
                origin=event.venue_slug,
                event_id=event.event_id,
                scraped_at=event.scraped_at,
                ticket_url=event.ticket_url,
                image_url=event.image_url,
            ),
        )
        return ensure_record_invariants(record)

    def _venue(self, event: DiscoveredEvent, slug: str) -> VenueRef:
        known = self.venues.get(slug)
        name = event.venue or (known.name if known else None)
        city = event.city or (known.city if known else None)
        state = event.state or (known.state if known else None)
        if not name or not city or not state:
            raise ValidationError(f"Unknown venue '{slug}' and no location given")
        return VenueRef(
            name=name,
            city=city,
            state=state,
            address=event.address or (known.address if known else None),
        )

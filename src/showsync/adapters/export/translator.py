"""Translate between export documents, show records and stored shows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from pydantic import ValidationError as PydanticValidationError

from showsync.domain.model import SocialLinks
from showsync.domain.reconciliation import ParseError
from showsync.domain.reconciliation.normalize import (
    ensure_record_invariants,
    format_event_date,
    parse_event_date,
)
from showsync.domain.reconciliation.records import (
    ArtistRef,
    ExportMetadata,
    ShowRecord,
    VenueRef,
)

from .document import export_filename, render_document, split_document
from .schema import ExportFrontmatter, SocialPayload

if TYPE_CHECKING:
    from datetime import datetime

    from showsync.domain.model import Show

EXPORT_VERSION: Final[str] = "1"


def describe_validation_error(exc: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'document'}: {error['msg']}"
        for error in exc.errors()
    )


def _social(payload: SocialPayload | None) -> SocialLinks:
    if payload is None:
        return SocialLinks()
    return SocialLinks.from_mapping(payload.model_dump())


def parse_export_document(text: str) -> ShowRecord:
    """Parse a markdown export document into a validated ``ShowRecord``."""

    document = split_document(text)
    try:
        payload = ExportFrontmatter.model_validate(document.frontmatter)
    except PydanticValidationError as exc:
        raise ParseError(f"Invalid export document: {describe_validation_error(exc)}") from exc

    event_date, start_time = parse_event_date(payload.show.event_date)
    artists = sorted(
        (
            ArtistRef(
                name=artist.name,
                position=artist.position,
                set_type=artist.set_type,
                city=artist.city,
                state=artist.state,
                social=_social(artist.social),
            )
            for artist in payload.artists
        ),
        key=lambda artist: artist.position,
    )
    venues = tuple(
        VenueRef(
            name=venue.name,
            city=venue.city,
            state=venue.state,
            address=venue.address,
            zipcode=venue.zipcode,
            social=_social(venue.social),
        )
        for venue in payload.venues
    )
    export = None
    if payload.version is not None or payload.exported_at is not None:
        export = ExportMetadata(
            version=payload.version or EXPORT_VERSION,
            exported_at=payload.exported_at,
        )

    show = payload.show
    record = ShowRecord(
        event_date=event_date,
        start_time=start_time,
        artists=tuple(artists),
        venues=venues,
        title=show.title,
        city=show.city,
        state=show.state,
        price=show.price,
        age_requirement=show.age_requirement,
        description=document.description,
        status=show.status,
        is_sold_out=show.is_sold_out,
        is_cancelled=show.is_cancelled,
        export=export,
    )
    return ensure_record_invariants(record)


def _compact(values: dict[str, object]) -> dict[str, object]:
    return {key: value for key, value in values.items() if value is not None}


def _social_dict(social: SocialLinks) -> dict[str, str] | None:
    return social.as_dict() or None


def export_frontmatter(record: ShowRecord) -> dict[str, object]:
    """Frontmatter mapping for ``record``, omitting unset optional fields."""

    frontmatter: dict[str, object] = {}
    if record.export is not None:
        frontmatter.update(
            _compact(
                {
                    "version": record.export.version,
                    "exported_at": (
                        record.export.exported_at.isoformat()
                        if record.export.exported_at
                        else None
                    ),
                }
            )
        )
    frontmatter["show"] = _compact(
        {
            "title": record.title,
            "event_date": format_event_date(record.event_date, record.start_time),
            "city": record.city,
            "state": record.state,
            "price": record.price,
            "age_requirement": record.age_requirement,
            "status": record.status.value if record.status else None,
            "is_sold_out": record.is_sold_out,
            "is_cancelled": record.is_cancelled,
        }
    )
    frontmatter["venues"] = [
        _compact(
            {
                "name": venue.name,
                "city": venue.city,
                "state": venue.state,
                "address": venue.address,
                "zipcode": venue.zipcode,
                "social": _social_dict(venue.social),
            }
        )
        for venue in record.venues
    ]
    frontmatter["artists"] = [
        _compact(
            {
                "name": artist.name,
                "position": artist.position,
                "set_type": artist.set_type.value,
                "city": artist.city,
                "state": artist.state,
                "social": _social_dict(artist.social),
            }
        )
        for artist in record.artists
    ]
    return frontmatter


def render_export_document(record: ShowRecord) -> str:
    return render_document(
        export_frontmatter(record),
        heading=record.title or record.label,
        description=record.description,
    )


def export_document_filename(record: ShowRecord) -> str:
    headliner = record.headliner
    title = record.title or (headliner.name if headliner is not None else "")
    return export_filename(record.event_date, title)


def record_from_show(show: Show, *, exported_at: datetime | None = None) -> ShowRecord:
    """Build the export view of a stored show."""

    artists = tuple(
        ArtistRef(
            name=entry.artist.name,
            position=entry.position,
            set_type=entry.set_type,
            city=entry.artist.city,
            state=entry.artist.state,
            social=entry.artist.social,
        )
        for entry in show.lineup
    )
    venues = tuple(
        VenueRef(
            name=venue.name,
            city=venue.city,
            state=venue.state,
            address=venue.address,
            zipcode=venue.zipcode,
            social=venue.social,
        )
        for venue in show.venues
    )
    return ShowRecord(
        event_date=show.event_date,
        start_time=show.start_time,
        artists=artists,
        venues=venues,
        title=show.title,
        city=show.city,
        state=show.state,
        price=show.price,
        age_requirement=show.age_requirement,
        description=show.description,
        status=show.status,
        is_sold_out=show.is_sold_out,
        is_cancelled=show.is_cancelled,
        export=ExportMetadata(version=EXPORT_VERSION, exported_at=exported_at),
    )

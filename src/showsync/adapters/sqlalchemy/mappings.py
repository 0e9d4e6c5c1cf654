"""SQLAlchemy mapping metadata for the showsync catalog model."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, time
from functools import cache
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    event,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from showsync.domain.model import (
    Artist,
    SetType,
    Show,
    ShowArtist,
    ShowSource,
    ShowStatus,
    SocialLinks,
    Venue,
    name_key,
)

if TYPE_CHECKING:
    from enum import StrEnum

    from sqlalchemy.engine import Connection, Engine
    from sqlalchemy.orm import Mapper

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class OffsetTime(TypeDecorator[time]):
    """Time of day stored as ISO text, UTC offset included."""

    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value: time | None, dialect: Dialect) -> str | None:
        _ = dialect
        return value.isoformat() if value is not None else None

    def process_result_value(self, value: str | None, dialect: Dialect) -> time | None:
        _ = dialect
        return time.fromisoformat(value) if value else None


class SocialLinksType(TypeDecorator[SocialLinks]):
    impl = Text
    cache_ok = True

    def process_bind_param(self, value: SocialLinks | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None or value.is_empty:
            return None
        return json.dumps(value.as_dict(), sort_keys=True)

    def process_result_value(self, value: str | None, dialect: Dialect) -> SocialLinks:
        _ = dialect
        if value is None:
            return SocialLinks()
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return SocialLinks()
        return SocialLinks.from_mapping(cast(dict[str, Any], loaded))


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

artist_table = Table(
    "artist",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("name_key", String, key="_name_key", nullable=False, index=True),
    Column("city", String, nullable=True),
    Column("state", String, nullable=True),
    Column("social", SocialLinksType, nullable=True),
)

venue_table = Table(
    "venue",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("name_key", String, key="_name_key", nullable=False),
    Column("city", String, nullable=False),
    Column("city_key", String, key="_city_key", nullable=False),
    Column("state", String, nullable=False),
    Column("address", String, nullable=True),
    Column("zipcode", String, nullable=True),
    Column("verified", Boolean, nullable=False, default=False),
    Column("social", SocialLinksType, nullable=True),
)
Index("ix_venue_name_key_city_key", venue_table.c._name_key, venue_table.c._city_key)  # noqa: SLF001

show_table = Table(
    "show",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String, nullable=True),
    Column("event_date", Date, nullable=False, index=True),
    Column("start_time", OffsetTime, nullable=True),
    Column("city", String, nullable=True),
    Column("state", String, nullable=True),
    Column("price", Float, nullable=True),
    Column("age_requirement", String, nullable=True),
    Column("description", Text, nullable=True),
    Column(
        "status",
        Enum(ShowStatus, native_enum=False, values_callable=_enum_values),
        nullable=False,
    ),
    Column(
        "source",
        Enum(ShowSource, native_enum=False, values_callable=_enum_values),
        nullable=False,
    ),
    Column("source_origin", String, nullable=True),
    Column("source_event_id", String, nullable=True),
    Column("scraped_at", UTCDateTime, nullable=True),
    Column("ticket_url", String, nullable=True),
    Column("image_url", String, nullable=True),
    Column("is_sold_out", Boolean, nullable=False, default=False),
    Column("is_cancelled", Boolean, nullable=False, default=False),
    Column("duplicate_of_show_id", Integer, ForeignKey("show.id"), nullable=True),
    Index("ix_show_source_origin_source_event_id", "source_origin", "source_event_id"),
)

# Association tables ----------------------------------------------------------

show_artist_table = Table(
    "show_artist",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("show_id", Integer, ForeignKey("show.id", ondelete="CASCADE"), nullable=False),
    Column("artist_id", Integer, ForeignKey("artist.id"), nullable=False, index=True),
    Column("position", Integer, nullable=False, default=0),
    Column(
        "set_type",
        Enum(SetType, native_enum=False, values_callable=_enum_values),
        nullable=False,
    ),
)

show_venue_table = Table(
    "show_venue",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("show_id", Integer, ForeignKey("show.id", ondelete="CASCADE"), nullable=False),
    Column("venue_id", Integer, ForeignKey("venue.id"), nullable=False, index=True),
    UniqueConstraint("show_id", "venue_id"),
)


def _sync_artist_keys(_mapper: Mapper[Artist], _connection: Connection, target: Artist) -> None:
    target._name_key = name_key(target.name)  # type: ignore[attr-defined]  # noqa: SLF001


def _sync_venue_keys(_mapper: Mapper[Venue], _connection: Connection, target: Venue) -> None:
    target._name_key = name_key(target.name)  # type: ignore[attr-defined]  # noqa: SLF001
    target._city_key = name_key(target.city)  # type: ignore[attr-defined]  # noqa: SLF001


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Artist, artist_table)
    mapper_registry.map_imperatively(Venue, venue_table)

    mapper_registry.map_imperatively(
        ShowArtist,
        show_artist_table,
        properties={
            "artist": relationship(Artist, lazy="joined"),
        },
    )

    mapper_registry.map_imperatively(
        Show,
        show_table,
        properties={
            "_lineup": relationship(
                ShowArtist,
                cascade="all, delete-orphan",
                order_by=show_artist_table.c.position,
            ),
            "_venues": relationship(
                Venue,
                secondary=show_venue_table,
                order_by=show_venue_table.c.id,
            ),
        },
    )

    for event_name in ("before_insert", "before_update"):
        event.listen(Artist, event_name, _sync_artist_keys)
        event.listen(Venue, event_name, _sync_venue_keys)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)

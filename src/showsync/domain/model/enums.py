"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    ARTIST = "artist"
    VENUE = "venue"
    SHOW = "show"


class SetType(StrEnum):
    """Billing of an artist on a show."""

    HEADLINER = "headliner"
    OPENER = "opener"
    PERFORMER = "performer"


class ShowStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PRIVATE = "private"


class ShowSource(StrEnum):
    """Who put a show into the catalog."""

    USER = "user"
    DISCOVERY = "discovery"

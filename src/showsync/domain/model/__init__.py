"""Catalog domain model."""

from __future__ import annotations

from .catalog import Artist, Show, ShowArtist, ShowSnapshot, Venue, name_key
from .entity import Entity
from .enums import EntityType, SetType, ShowSource, ShowStatus
from .social import SOCIAL_KEYS, SocialLinks

__all__ = [
    "SOCIAL_KEYS",
    "Artist",
    "Entity",
    "EntityType",
    "SetType",
    "Show",
    "ShowArtist",
    "ShowSnapshot",
    "ShowSource",
    "ShowStatus",
    "SocialLinks",
    "Venue",
    "name_key",
]

"""Discovery scraper output."""

from __future__ import annotations

from .schema import DiscoveredEvent
from .translator import (
    DiscoveryTranslator,
    build_description,
    parse_price,
    parse_show_time,
    split_title_artists,
)

__all__ = [
    "DiscoveredEvent",
    "DiscoveryTranslator",
    "build_description",
    "parse_price",
    "parse_show_time",
    "split_title_artists",
]

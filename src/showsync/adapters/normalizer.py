"""Dispatch raw inputs to the translator for their shape."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from showsync.adapters.discovery import DiscoveryTranslator
from showsync.adapters.export import parse_export_document
from showsync.config import VenueRegistry
from showsync.domain.reconciliation import ParseError

if TYPE_CHECKING:
    from showsync.domain.reconciliation import RawInput, ShowRecord


@dataclass(slots=True)
class ShowRecordNormalizer:
    """Export documents arrive as text, discovery events as mappings."""

    venues: VenueRegistry = field(default_factory=VenueRegistry.defaults)

    def __call__(self, raw: RawInput) -> ShowRecord:
        return self.parse(raw)

    def parse(self, raw: RawInput) -> ShowRecord:
        if isinstance(raw, str):
            return parse_export_document(raw)
        if isinstance(raw, Mapping):
            return DiscoveryTranslator(self.venues)(raw)
        raise ParseError(f"Unsupported record type: {type(raw).__name__}")


if TYPE_CHECKING:
    from showsync.domain.reconciliation import NormalizeRawRecord

    _normalizer_check: NormalizeRawRecord = ShowRecordNormalizer()

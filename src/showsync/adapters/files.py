"""Load raw import records from files on disk."""

from __future__ import annotations

import json
from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING, cast

from showsync.domain.reconciliation import ParseError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from showsync.domain.reconciliation import RawInput

log = getLogger(__name__)

EXPORT_SUFFIXES = frozenset({".md", ".markdown"})
DISCOVERY_SUFFIXES = frozenset({".json"})


def _discovery_records(document: object, path: Path) -> list[RawInput]:
    """A single event, a list of events, or a mapping of venue slug to events."""

    if isinstance(document, list):
        items = cast(list[object], document)
    elif isinstance(document, Mapping):
        mapping = cast(Mapping[str, object], document)
        if "id" in mapping or "venueSlug" in mapping:
            items = [mapping]
        else:
            items = []
            for slug, events in mapping.items():
                if not isinstance(events, list):
                    raise ParseError(f"{path}: events for '{slug}' must be a list")
                items.extend(cast(list[object], events))
    else:
        raise ParseError(f"{path}: expected a JSON object or array")

    records: list[RawInput] = []
    for item in items:
        if not isinstance(item, Mapping):
            raise ParseError(f"{path}: every discovery event must be a JSON object")
        records.append(cast(Mapping[str, object], item))
    return records


def load_records(path: Path) -> list[RawInput]:
    """Read the raw records stored in ``path``."""

    suffix = path.suffix.lower()
    if suffix in EXPORT_SUFFIXES:
        return [path.read_text(encoding="utf-8")]
    if suffix in DISCOVERY_SUFFIXES:
        with path.open(encoding="utf-8") as handle:
            try:
                document = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ParseError(f"{path}: invalid JSON: {exc}") from exc
        return _discovery_records(document, path)
    raise ParseError(f"{path}: unsupported file type '{path.suffix}'")


def load_all_records(paths: Iterable[Path]) -> list[RawInput]:
    records: list[RawInput] = []
    for path in paths:
        loaded = load_records(path)
        log.debug("Loaded %d record(s) from %s", len(loaded), path)
        records.extend(loaded)
    return records

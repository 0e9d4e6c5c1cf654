from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from showsync.adapters.files import load_all_records, load_records
from showsync.domain.reconciliation import ParseError
from tests.support.records import discovery_event, export_doc

if TYPE_CHECKING:
    from pathlib import Path


def test_markdown_file_is_one_record(tmp_path: Path) -> None:
    path = tmp_path / "show-2025-03-01-the-headliners.md"
    path.write_text(export_doc(), encoding="utf-8")

    assert load_records(path) == [export_doc()]


@pytest.mark.parametrize(
    "document",
    [
        discovery_event("evt-1"),
        [discovery_event("evt-1"), discovery_event("evt-2")],
        {"valley-bar": [discovery_event("evt-1")], "crescent-ballroom": []},
    ],
)
def test_discovery_json_shapes(tmp_path: Path, document: object) -> None:
    path = tmp_path / "events.json"
    path.write_text(json.dumps(document), encoding="utf-8")

    records = load_records(path)

    assert records[0] == discovery_event("evt-1")


def test_records_from_several_files_keep_order(tmp_path: Path) -> None:
    markdown = tmp_path / "show.markdown"
    markdown.write_text(export_doc(), encoding="utf-8")
    events = tmp_path / "events.json"
    events.write_text(json.dumps([discovery_event("evt-1"), discovery_event("evt-2")]))

    records = load_all_records([events, markdown])

    assert records == [discovery_event("evt-1"), discovery_event("evt-2"), export_doc()]


@pytest.mark.parametrize(
    ("filename", "content", "message"),
    [
        ("events.json", "{not json", "invalid JSON"),
        ("events.json", "42", "expected a JSON object or array"),
        ("events.json", '{"valley-bar": {"id": 1}}', "events for 'valley-bar' must be a list"),
        ("events.json", '["evt-1"]', "every discovery event must be a JSON object"),
        ("events.csv", "id,date", "unsupported file type '.csv'"),
    ],
)
def test_unreadable_files(tmp_path: Path, filename: str, content: str, message: str) -> None:
    path = tmp_path / filename
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ParseError, match=message):
        load_records(path)

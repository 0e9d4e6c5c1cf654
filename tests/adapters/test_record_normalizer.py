from __future__ import annotations

from typing import cast

import pytest

from showsync.adapters.normalizer import ShowRecordNormalizer
from showsync.config import VenueRegistry
from showsync.domain.reconciliation import ParseError, RawInput, ValidationError
from tests.support.records import discovery_event, export_doc


def test_text_is_parsed_as_export_document() -> None:
    record = ShowRecordNormalizer()(export_doc(openers=["Early Birds"]))

    assert record.is_discovered is False
    assert [artist.name for artist in record.artists] == ["The Headliners", "Early Birds"]


def test_mapping_is_translated_as_discovery_event() -> None:
    record = ShowRecordNormalizer().parse(discovery_event())

    assert record.is_discovered is True
    assert record.venues[0].address == "130 N Central Ave"


def test_custom_registry_is_used_for_discovery() -> None:
    normalizer = ShowRecordNormalizer(VenueRegistry())

    with pytest.raises(ValidationError, match="Unknown venue 'valley-bar'"):
        normalizer(discovery_event(venue="Valley Bar"))


def test_unsupported_input_type() -> None:
    with pytest.raises(ParseError, match="Unsupported record type: list"):
        ShowRecordNormalizer()(cast(RawInput, ["not", "a", "record"]))

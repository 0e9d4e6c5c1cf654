from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from showsync.domain.reconciliation import (
    Imported,
    ImportMode,
    ImportResultEntry,
    OutcomeChannel,
    OutcomeEvent,
)

if TYPE_CHECKING:
    import pytest


def _event(index: int = 0) -> OutcomeEvent:
    entry = ImportResultEntry(index=index, outcome=Imported(show_id=1), message="IMPORTED: x")
    return OutcomeEvent(mode=ImportMode.COMMIT, index=index, entry=entry)


def test_subscribers_receive_events_in_subscription_order() -> None:
    channel = OutcomeChannel()
    seen: list[tuple[str, int]] = []
    channel.subscribe(lambda event: seen.append(("first", event.index)))
    channel.subscribe(lambda event: seen.append(("second", event.index)))

    channel.publish(_event(0))
    channel.publish(_event(1))

    assert seen == [("first", 0), ("second", 0), ("first", 1), ("second", 1)]
    assert len(channel) == 2


def test_unsubscribe_stops_delivery() -> None:
    channel = OutcomeChannel()
    seen: list[OutcomeEvent] = []
    unsubscribe = channel.subscribe(seen.append)

    unsubscribe()
    unsubscribe()
    channel.publish(_event())

    assert seen == []
    assert len(channel) == 0


def test_failing_listener_is_logged_and_skipped(caplog: pytest.LogCaptureFixture) -> None:
    channel = OutcomeChannel()
    seen: list[int] = []

    def explode(event: OutcomeEvent) -> None:
        raise RuntimeError(f"listener broke on {event.index}")

    channel.subscribe(explode)
    channel.subscribe(lambda event: seen.append(event.index))

    with caplog.at_level(logging.ERROR, logger="showsync.domain.reconciliation.events"):
        channel.publish(_event(4))

    assert seen == [4]
    assert "failed for record 4" in caplog.text

"""Explicit channel through which callers observe per-record outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from .outcomes import ImportMode
    from .report import ImportResultEntry


log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class OutcomeEvent:
    mode: ImportMode
    index: int
    entry: ImportResultEntry


type OutcomeListener = Callable[[OutcomeEvent], None]


@dataclass(slots=True)
class OutcomeChannel:
    """Fan-out of outcome events to subscribers.

    A failing listener is logged and skipped; it never changes the outcome of the
    record or the rest of the batch.
    """

    _listeners: list[OutcomeListener] = field(default_factory=list)

    def subscribe(self, listener: OutcomeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: OutcomeEvent) -> None:
        for listener in tuple(self._listeners):
            try:
                listener(event)
            except Exception:
                log.exception("Outcome listener %r failed for record %d", listener, event.index)

    def __len__(self) -> int:
        return len(self._listeners)

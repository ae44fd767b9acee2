from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.enums import ChangeKind

logger = logging.getLogger(__name__)

ALL_EVENTS = "*"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    kind: ChangeKind
    record_id: Optional[int] = None


ChangeListener = Callable[[ChangeEvent], None]


class ChangeFeed:
    """In-process change notifications, one channel per table.

    Subscribers only learn that something changed so they can refresh;
    the event carries no row payload.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: list[tuple[str, str, ChangeListener]] = []

    def subscribe(self, table: str, callback: ChangeListener, *, event: str = ALL_EVENTS) -> Callable[[], None]:
        entry = (table, event, callback)
        with self._lock:
            self._listeners.append(entry)

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._listeners:
                    self._listeners.remove(entry)

        return unsubscribe

    def publish(self, table: str, kind: ChangeKind, record_id: Optional[int] = None) -> None:
        change = ChangeEvent(table=table, kind=kind, record_id=record_id)
        with self._lock:
            targets = [
                cb for (t, ev, cb) in self._listeners if t == table and ev in (ALL_EVENTS, kind.value)
            ]

        for cb in targets:
            try:
                cb(change)
            except Exception:
                # A broken listener must not undo a write that already committed.
                logger.exception("Change listener failed for %s %s", table, kind.value)

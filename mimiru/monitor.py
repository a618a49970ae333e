"""Database change events and the handlers that react to them."""

from __future__ import annotations

import logging
from collections import defaultdict
from concurrent.futures import Executor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from .entities import utc_now

logger = logging.getLogger(__name__)

_CHANNEL_TABLES = {
    "playback_sessions_change": "playback_sessions",
    "user_ratings_change": "user_ratings",
}


@dataclass
class DatabaseEvent:
    """A change seen in one database table."""

    table_name: str
    event_type: str = "CHANGE"
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=utc_now)


EventHandler = Callable[[DatabaseEvent], None]


class DatabaseMonitorService:
    """Routes database events to the handlers registered for their table.

    Handlers run on the given executor, or inline when there is none; an
    exception from one handler is logged and does not reach the others.
    """

    def __init__(self, executor: Executor | None = None):
        self._executor = executor
        self._handlers: defaultdict[str, list[EventHandler]] = defaultdict(list)

    def register_event_handler(self, table_name: str, handler: EventHandler) -> None:
        self._handlers[table_name].append(handler)

    def handle_notification(self, channel: str, payload: str) -> DatabaseEvent | None:
        """Turn a notification into an event and dispatch it; None for unknown channels."""
        table_name = _CHANNEL_TABLES.get(channel)
        if table_name is None:
            return None
        event = DatabaseEvent(
            table_name=table_name,
            event_type="CHANGE",
            data={"payload": payload},
        )
        self.dispatch(event)
        return event

    def dispatch(self, event: DatabaseEvent) -> None:
        for handler in list(self._handlers.get(event.table_name, ())):
            if self._executor is not None:
                self._executor.submit(self._run, handler, event)
            else:
                self._run(handler, event)

    @staticmethod
    def _run(handler: EventHandler, event: DatabaseEvent) -> None:
        try:
            handler(event)
        except Exception:
            logger.exception("handler for %s failed", event.table_name)
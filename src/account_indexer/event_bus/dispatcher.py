"""In-process named-event dispatcher with logged subscribe/emit."""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

ACCOUNT_UPDATE = "ACCOUNT_UPDATE"

Listener = Callable[[Any], Any]


class EventDispatcher:
    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def subscribe(self, event_name: str, listener: Listener) -> None:
        logger.debug("subscribe(event_name=%s, listener=%r)", event_name, listener)
        self._listeners.setdefault(event_name, []).append(listener)
        logger.info("Listening to %s events...", event_name)

    def listener_count(self, event_name: str) -> int:
        return len(self._listeners.get(event_name, []))

    def emit(self, event_name: str, event: Any) -> bool:
        """Deliver the event to every listener; False when nobody is subscribed."""
        logger.debug("emit(event_name=%s, event=%r)", event_name, event)
        listeners = list(self._listeners.get(event_name, []))
        if not listeners:
            logger.warning("event: %s has no listeners!", event_name)
            return False
        for listener in listeners:
            listener(event)
        logger.debug("Successfully emitted %s %r", event_name, event)
        return True

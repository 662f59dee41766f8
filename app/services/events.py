"""In-process event dispatcher.

Handlers are plain callables registered against an event name. Triggering
an event calls every handler in registration order and returns their
results, so callers can pick whichever result suits them.

Usage:
    from app.services.events import events

    def gravatar_off(user_id, email, parameters):
        return "/static/avatars/default.png"

    events.add_handler("onUserAvatar", gravatar_off)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

EventHandler = Callable[..., Any]


class EventDispatcher:
    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}

    def add_handler(self, event_name: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_name, []).append(handler)

    def remove_handler(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def has_handlers(self, event_name: str) -> bool:
        return bool(self._handlers.get(event_name))

    def clear(self, event_name: str | None = None) -> None:
        if event_name is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_name, None)

    def trigger(self, event_name: str, *args: Any) -> list[Any]:
        handlers = list(self._handlers.get(event_name, []))
        if handlers:
            logger.debug("Triggering %s on %d handler(s)", event_name, len(handlers))
        return [handler(*args) for handler in handlers]


events = EventDispatcher()

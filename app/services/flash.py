"""Session-backed flash storage.

A flash value survives exactly one read: ``get_flash`` returns it and
removes it from the session. Notices are queued the same way and drained
by the next rendered page.

Values must be JSON serialisable, since the session lives in a signed
cookie.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

from fastapi import Request

from app.config import settings

FLASH_KEY = "_flash"
MESSAGES_KEY = "_messages"

SEVERITIES = ("error", "warning", "info", "success")

_MISSING = object()


def form_cache_key(view_name: str) -> str:
    """Session key holding the last submitted form of an admin view."""
    return f"{settings.application_name}_{view_name}"


class FlashStore:
    def __init__(self, session: MutableMapping[str, Any]):
        self.session = session

    def _bucket(self) -> dict:
        return dict(self.session.get(FLASH_KEY) or {})

    def set_flash(self, key: str, value: Any) -> None:
        bucket = self._bucket()
        bucket[key] = value
        self.session[FLASH_KEY] = bucket

    def get_flash(self, key: str, default: Any = None) -> Any:
        bucket = self._bucket()
        value = bucket.pop(key, _MISSING)
        if value is _MISSING:
            return default
        if bucket:
            self.session[FLASH_KEY] = bucket
        else:
            self.session.pop(FLASH_KEY, None)
        return value

    def has_flash(self, key: str) -> bool:
        return key in self._bucket()

    def enqueue_message(self, message: str, severity: str = "info") -> None:
        if severity not in SEVERITIES:
            severity = "info"
        messages = list(self.session.get(MESSAGES_KEY) or [])
        messages.append({"message": message, "type": severity})
        self.session[MESSAGES_KEY] = messages

    def pop_messages(self) -> list[dict]:
        return list(self.session.pop(MESSAGES_KEY, None) or [])


def get_flash_store(request: Request) -> FlashStore:
    """FastAPI dependency returning the flash store of the current session."""
    return FlashStore(request.session)

"""Avatar URLs for user accounts.

Gravatar is the default. Handlers registered for ``onUserAvatar`` and
``onUserAvatarEditURL`` on the event dispatcher can supply a different
URL; they are called with ``(user_id, email, parameters)``.
"""

from __future__ import annotations

import hashlib
from typing import Any, Protocol

from app.config import settings
from app.services.events import EventDispatcher, events

AVATAR_EVENT = "onUserAvatar"
AVATAR_EDIT_URL_EVENT = "onUserAvatarEditURL"

MIN_SIZE = 1
MAX_SIZE = 2048


class HasIdentityAndEmail(Protocol):
    id: Any
    email: str | None
    parameters: Any


def _email_hash(email: str | None) -> str:
    return hashlib.md5((email or "").strip().lower().encode("utf-8")).hexdigest()


def _parameters(user: HasIdentityAndEmail) -> dict:
    parameters = getattr(user, "parameters", None)
    if isinstance(parameters, dict):
        return dict(parameters)
    if parameters is None:
        return {}
    return dict(parameters)


def clamp_size(size: int) -> int:
    return max(MIN_SIZE, min(MAX_SIZE, int(size)))


def get_avatar(user: HasIdentityAndEmail, size: int = 32, dispatcher: EventDispatcher | None = None) -> str:
    default_url = "{}/avatar/{}?d=mp&s={}".format(
        settings.gravatar_base_url.rstrip("/"),
        _email_hash(user.email),
        clamp_size(size),
    )
    results = (dispatcher or events).trigger(AVATAR_EVENT, user.id, user.email, _parameters(user))
    for result in results:
        # Blank strings do not count as an override here
        if isinstance(result, str) and result.strip():
            return result.strip()
    return default_url


def get_avatar_edit_url(user: HasIdentityAndEmail, dispatcher: EventDispatcher | None = None) -> str:
    default_url = "{}/{}".format(settings.gravatar_base_url.rstrip("/"), _email_hash(user.email))
    results = (dispatcher or events).trigger(AVATAR_EDIT_URL_EVENT, user.id, user.email, _parameters(user))
    for result in results:
        # Any string wins, even a blank one
        if isinstance(result, str):
            return result.strip()
    return default_url

"""Service helpers for admin web layer."""

from app.models.user import SUPER_PRIVILEGE
from app.services.avatar import get_avatar, get_avatar_edit_url
from app.services.flash import FlashStore


def _get_initials(name: str) -> str:
    if not name:
        return "??"
    parts = name.split()
    if len(parts) >= 2:
        return (parts[0][0] + parts[-1][0]).upper()
    return name[0:2].upper()


def get_current_user(request) -> dict:
    """Get current user context from the request state.

    The user should already be populated by require_web_auth dependency.
    No fallback DB queries - if auth isn't set, return empty user.
    """
    user = getattr(request.state, "user", None)

    if user:
        name = (user.name or user.username or "").strip()
        return {
            "id": user.id,
            "username": user.username,
            "initials": _get_initials(name),
            "name": name,
            "email": user.email or "",
            "avatar": get_avatar(user, 64),
            "avatar_edit_url": get_avatar_edit_url(user),
            "is_super": user.get_privilege(SUPER_PRIVILEGE),
        }

    return {
        "id": 0,
        "username": "",
        "initials": "??",
        "name": "Unknown User",
        "email": "",
        "avatar": "",
        "avatar_edit_url": "",
        "is_super": False,
    }


def build_admin_context(request, flash: FlashStore, **extra) -> dict:
    """Build common context for admin templates.

    Drains the queued notices, so call it once per rendered page.
    """
    current_user = get_current_user(request)
    context = {
        "request": request,
        "current_user": current_user,
        "messages": flash.pop_messages(),
    }
    context.update(extra)
    return context

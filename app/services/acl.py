"""Privilege checks for the admin views.

Every task of an admin view maps to the privileges that allow it; holding
any one of them is enough. ``panopticon.super`` allows everything. User
records get an extra record-level check: non-super users only ever see
their own account.

Usage:
    from app.services.acl import acl_check

    acl_check(current_user, "sites", "edit")  # raises HTTPException(403)
"""

from __future__ import annotations

import logging
from typing import Protocol

from fastapi import HTTPException

from app.models.user import SUPER_PRIVILEGE

logger = logging.getLogger(__name__)

VIEW = "panopticon.view"
ADMIN = "panopticon.admin"
ADD_OWN = "panopticon.addown"
EDIT_OWN = "panopticon.editown"

# An empty tuple means any signed-in user may perform the task
ACL_MAP: dict[str, dict[str, tuple[str, ...]]] = {
    "sites": {
        "browse": (VIEW,),
        "read": (VIEW,),
        "add": (ADMIN, ADD_OWN),
        "copy": (ADMIN, ADD_OWN),
        "remove": (ADMIN, ADD_OWN),
        "edit": (ADMIN, EDIT_OWN),
        "save": (ADMIN, EDIT_OWN),
        "apply": (ADMIN, EDIT_OWN),
        "cancel": (),
    },
    "users": {
        "browse": (SUPER_PRIVILEGE,),
        "add": (SUPER_PRIVILEGE,),
        "copy": (SUPER_PRIVILEGE,),
        "remove": (SUPER_PRIVILEGE,),
        "read": (),
        "edit": (),
        "save": (),
        "apply": (),
        "cancel": (),
    },
}


class PrivilegedActor(Protocol):
    id: int

    def get_privilege(self, key: str) -> bool: ...


def _is_super(actor: PrivilegedActor | None) -> bool:
    return actor is not None and actor.get_privilege(SUPER_PRIVILEGE)


def check_access(actor: PrivilegedActor | None, view: str, task: str) -> bool:
    if actor is None or not getattr(actor, "id", None):
        return False
    required = ACL_MAP.get(view, {}).get(task)
    if required is None:
        return False
    if _is_super(actor) or not required:
        return True
    return any(actor.get_privilege(privilege) for privilege in required)


def acl_check(actor: PrivilegedActor | None, view: str, task: str) -> None:
    if not check_access(actor, view, task):
        logger.warning(
            "Denied %s.%s to user %s", view, task, getattr(actor, "id", None)
        )
        raise HTTPException(status_code=403, detail="You are not allowed to access this page")


def can_access_user(actor: PrivilegedActor | None, target_id: int | None) -> bool:
    """Anyone may reach their own account; only super users reach the others."""
    if actor is None or not getattr(actor, "id", None):
        return False
    if not target_id:
        target_id = actor.id
    if _is_super(actor):
        return True
    return target_id == actor.id


def require_user_access(actor: PrivilegedActor | None, target_id: int | None) -> None:
    if not can_access_user(actor, target_id):
        logger.warning("User %s denied access to user record %s", getattr(actor, "id", None), target_id)
        raise HTTPException(status_code=403, detail="You are not allowed to access this user")

"""Saving user accounts from the admin form.

Only super users may rename accounts, change group membership or change
privileges. Everybody else can only change their own name, email and
password. Every check runs before the user record is touched, so a
rejected save never leaves a half-edited user behind.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import urlparse

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from app.models.user import KNOWN_PRIVILEGES, PRIVILEGE_PREFIX, SUPER_PRIVILEGE, User
from app.schemas.user import UserSaveForm
from app.services.flash import FlashStore, form_cache_key
from app.services.passwords import hash_password
from app.services.routing import route
from app.services.user_manager import UserManager, user_manager

logger = logging.getLogger(__name__)

USERS_VIEW = "users"


class UserValidationError(Exception):
    message = "The user could not be saved."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class EmptyUsername(UserValidationError):
    message = "You need to provide a username."


class DuplicateUsername(UserValidationError):
    def __init__(self, username: str):
        super().__init__(f"The username '{username}' is already in use by another user.")


class PasswordRequired(UserValidationError):
    message = "You need to type in the password twice to create a new user."


class PasswordMismatch(UserValidationError):
    message = "The passwords do not match."


class EmptyName(UserValidationError):
    message = "You need to provide a full name."


class CannotRemoveOwnSuper(UserValidationError):
    message = "You cannot remove the Super User privilege from your own account."


SaveCallback = Callable[[UserSaveForm], None]


@dataclass
class _PendingChanges:
    username: str | None = None
    password_hash: str | None = None
    name: str = ""
    email: str = ""
    groups: list[int] | None = None
    permissions: list[str] | None = None
    warnings: list[str] = field(default_factory=list)


def is_valid_email(email: str) -> bool:
    if not email:
        return False
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


class UserSaveWorkflow:
    def __init__(
        self,
        store: UserManager = user_manager,
        before_save: SaveCallback | None = None,
        after_save: SaveCallback | None = None,
    ):
        self.store = store
        self.before_save = before_save
        self.after_save = after_save

    def restrict_fields(self, actor: User, target: User, form: UserSaveForm) -> UserSaveForm:
        """Replace the fields a non-super actor is not allowed to change."""
        if actor.get_privilege(SUPER_PRIVILEGE):
            return form
        return form.model_copy(
            update={
                "username": target.username or "",
                "groups": target.usergroups,
                "permissions": target.granted_privileges(),
            }
        )

    def _validate(self, db: Session, actor: User, target: User, form: UserSaveForm, is_new_user: bool) -> _PendingChanges:
        is_super = actor.get_privilege(SUPER_PRIVILEGE)
        editing_myself = target.id is not None and target.id == actor.id
        changes = _PendingChanges()

        if is_super:
            username = form.username
            if not username:
                raise EmptyUsername()
            if target.username != username and self.store.get_user_by_username(db, username) is not None:
                raise DuplicateUsername(username)
            changes.username = username

        password, password2 = form.password, form.password2
        if is_new_user or password or password2:
            if is_new_user and (not password or not password2):
                raise PasswordRequired()
            if password != password2:
                raise PasswordMismatch()
            changes.password_hash = hash_password(password)

        if not form.name:
            raise EmptyName()
        changes.name = form.name

        if not is_valid_email(form.email):
            changes.warnings.append(f"The email address '{form.email}' does not look valid.")
        changes.email = form.email

        if is_super:
            if editing_myself and SUPER_PRIVILEGE not in form.permissions:
                raise CannotRemoveOwnSuper()
            changes.groups = list(form.groups)
            changes.permissions = list(form.permissions)

        return changes

    @staticmethod
    def _apply(target: User, changes: _PendingChanges) -> None:
        if changes.username is not None:
            target.username = changes.username
        if changes.password_hash is not None:
            target.password_hash = changes.password_hash
        target.name = changes.name
        target.email = changes.email
        if changes.groups is not None:
            target.set_parameter("usergroups", changes.groups)
        if changes.permissions is not None:
            # Full replace: clear every known privilege, then grant the submitted ones
            for key in KNOWN_PRIVILEGES:
                target.set_privilege(f"{PRIVILEGE_PREFIX}{key}", False)
            for key in changes.permissions:
                target.set_privilege(key, True)

    def apply_save(
        self,
        db: Session,
        actor: User,
        target_id: int,
        form: UserSaveForm,
        flash: FlashStore | None = None,
    ) -> User:
        target = self.store.get_user(db, target_id)
        is_new_user = not target_id or target.id != target_id
        form = self.restrict_fields(actor, target, form)

        if self.before_save is not None:
            self.before_save(form)

        changes = self._validate(db, actor, target, form, is_new_user)

        for warning in changes.warnings:
            logger.info("User %s save warning: %s", target_id, warning)
            if flash is not None:
                flash.enqueue_message(warning, "warning")

        self._apply(target, changes)
        saved = self.store.save_user(db, target)

        if self.after_save is not None:
            self.after_save(form)
        return saved


def decode_return_url(value: str | None) -> str:
    """Decode a base64 ``returnurl``; anything unusable or off-site becomes ''."""
    if not value:
        return ""
    raw = value.strip()
    raw += "=" * (-len(raw) % 4)
    try:
        decoded = base64.b64decode(raw, altchars=b"-_" if ("-" in raw or "_" in raw) else None).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return ""
    parsed = urlparse(decoded)
    if parsed.scheme or parsed.netloc or decoded.startswith("//"):
        return ""
    return decoded


def failed_save_url(target_id: int, return_url: str | None = None, view_name: str = USERS_VIEW) -> str:
    custom_url = decode_return_url(return_url)
    if custom_url:
        return route(custom_url)
    if target_id:
        return route(f"index.php?view={view_name}&task=edit&id={target_id}")
    return route(f"index.php?view={view_name}&task=add")


def handle_failed_save(
    flash: FlashStore,
    form: UserSaveForm,
    error: UserValidationError,
    return_url: str | None = None,
    view_name: str = USERS_VIEW,
) -> str:
    """Keep the submitted form for redisplay, queue the error, return the redirect URL."""
    flash.set_flash(form_cache_key(view_name), form.form_cache())
    flash.enqueue_message(error.detail, "error")
    logger.info("User %s not saved: %s", form.id, error.detail)
    return failed_save_url(form.id, return_url, view_name)


user_save_workflow = UserSaveWorkflow()

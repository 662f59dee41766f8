from __future__ import annotations

import builtins
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.user import Group, User
from app.services.common import apply_ordering, apply_pagination, coerce_id
from app.services.passwords import verify_password

logger = logging.getLogger(__name__)


def _attach_group_privileges(db: Session, user: User) -> User:
    group_ids = [coerce_id(group_id) for group_id in user.usergroups]
    group_ids = [group_id for group_id in group_ids if group_id]
    if not group_ids:
        user.group_privileges = frozenset()
        return user
    groups = db.query(Group).filter(Group.id.in_(group_ids)).all()
    user.group_privileges = frozenset(
        privilege for group in groups for privilege in (group.privileges or [])
    )
    return user


class UserManager:
    @staticmethod
    def get_user(db: Session, user_id=None) -> User:
        """Load a user by id; an unknown or empty id yields a blank, unsaved user."""
        record_id = coerce_id(user_id)
        user = db.get(User, record_id) if record_id else None
        if user is None:
            return User(username="", name="", email="", password_hash="", privileges={}, parameters={})
        return _attach_group_privileges(db, user)

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> User | None:
        if not username:
            return None
        user = db.query(User).filter(User.username == username).first()
        if user is None:
            return None
        return _attach_group_privileges(db, user)

    @staticmethod
    def save_user(db: Session, user: User) -> User:
        if user.id is None:
            db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Saved user %s (%s)", user.id, user.username)
        return _attach_group_privileges(db, user)

    @staticmethod
    def authenticate(db: Session, username: str, password: str) -> User | None:
        user = UserManager.get_user_by_username(db, username.strip())
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for username %r", username)
            return None
        return user

    @staticmethod
    def list(
        db: Session,
        search: str | None = None,
        order_by: str = "username",
        order_dir: str = "asc",
        limit: int = 50,
        offset: int = 0,
    ) -> builtins.list[User]:
        query = db.query(User)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    User.username.ilike(pattern),
                    User.name.ilike(pattern),
                    User.email.ilike(pattern),
                )
            )
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"id": User.id, "username": User.username, "name": User.name, "email": User.email},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def list_groups(db: Session) -> builtins.list[Group]:
        return db.query(Group).order_by(Group.title.asc()).all()


user_manager = UserManager()

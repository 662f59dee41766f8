from datetime import UTC, datetime

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base

PRIVILEGE_PREFIX = "panopticon."

# Privilege keys known to the application, without the namespace prefix
KNOWN_PRIVILEGES = ("super", "admin", "view", "run", "addown", "editown")

SUPER_PRIVILEGE = f"{PRIVILEGE_PREFIX}super"


class Group(Base):
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    privileges: Mapped[list | None] = mapped_column(JSON, default=list)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    privileges: Mapped[dict | None] = mapped_column(JSON, default=dict)
    parameters: Mapped[dict | None] = mapped_column(JSON, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    # Privileges inherited from the user's groups. Filled in by the user
    # manager when the user is loaded; never persisted.
    group_privileges = frozenset()

    def get_privilege(self, key: str) -> bool:
        if (self.privileges or {}).get(key):
            return True
        return key in self.group_privileges

    def set_privilege(self, key: str, value: bool) -> None:
        # Reassign so SQLAlchemy notices the JSON column changed
        privileges = dict(self.privileges or {})
        privileges[key] = bool(value)
        self.privileges = privileges

    def granted_privileges(self) -> list[str]:
        return sorted(key for key, value in (self.privileges or {}).items() if value)

    def get_parameter(self, key: str, default=None):
        return (self.parameters or {}).get(key, default)

    def set_parameter(self, key: str, value) -> None:
        parameters = dict(self.parameters or {})
        parameters[key] = value
        self.parameters = parameters

    @property
    def usergroups(self) -> list[int]:
        return list(self.get_parameter("usergroups", []) or [])

    @property
    def is_super(self) -> bool:
        return self.get_privilege(SUPER_PRIVILEGE)

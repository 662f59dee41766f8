from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserSaveForm(BaseModel):
    """Raw data submitted by the user edit form.

    Kept as submitted (apart from trimming) so it can be cached and put back
    into the form when the save fails.
    """

    id: int = 0
    username: str = ""
    name: str = ""
    email: str = ""
    password: str = ""
    password2: str = ""
    groups: list[int] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)

    def form_cache(self) -> dict:
        # Passwords never go into the session
        return self.model_dump(exclude={"password", "password2"})


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    username: str
    name: str
    email: str
    privileges: dict | None = None
    parameters: dict | None = None

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _validate_site_url(value: str) -> str:
    value = value.strip()
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError("The site URL must be an absolute http:// or https:// address")
    return value


SiteUrl = Annotated[str, Field(min_length=1, max_length=1024), AfterValidator(_validate_site_url)]


class SiteBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    name: str = Field(min_length=1, max_length=255)
    url: SiteUrl
    enabled: bool = True
    config: dict | None = None


class SiteCreate(SiteBase):
    created_by: int | None = None


class SiteUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    url: SiteUrl | None = None
    enabled: bool | None = None
    config: dict | None = None
    modified_by: int | None = None


class SiteRead(SiteBase):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
    id: int
    created_by: int | None = None
    created_at: datetime
    modified_at: datetime

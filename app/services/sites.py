from __future__ import annotations

import builtins
import logging
from collections.abc import Callable

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.site import Site
from app.schemas.site import SiteCreate, SiteUpdate
from app.services.common import apply_ordering, apply_pagination, coerce_id, get_or_404

logger = logging.getLogger(__name__)

CONNECTION_ERROR_FLASH = "site_connection_error"
HTTP_CODE_FLASH = "site_connection_http_code"
CURL_ERROR_FLASH = "site_connection_curl_error"


class SiteConnectionError(Exception):
    """Raised by a connection checker when the remote site cannot be reached."""

    def __init__(self, message: str, http_code: int | None = None, curl_error: str | None = None):
        super().__init__(message)
        self.http_code = http_code
        self.curl_error = curl_error

    @property
    def detail(self) -> str:
        return str(self)


# Called with the validated payload before a site is written. Raises
# SiteConnectionError when the site does not answer as expected.
ConnectionChecker = Callable[[SiteCreate | SiteUpdate], None]


class Sites:
    @staticmethod
    def create(db: Session, payload: SiteCreate) -> Site:
        site = Site(**payload.model_dump())
        if site.config is None:
            site.config = {}
        db.add(site)
        db.commit()
        db.refresh(site)
        logger.info("Created site %s (%s)", site.id, site.url)
        return site

    @staticmethod
    def get(db: Session, site_id) -> Site:
        return get_or_404(db, Site, site_id, detail="Site not found")

    @staticmethod
    def find(db: Session, site_id) -> Site | None:
        record_id = coerce_id(site_id)
        return db.get(Site, record_id) if record_id else None

    @staticmethod
    def list(
        db: Session,
        enabled: bool | None = None,
        search: str | None = None,
        order_by: str = "name",
        order_dir: str = "asc",
        limit: int = 50,
        offset: int = 0,
    ) -> builtins.list[Site]:
        query = db.query(Site)
        if enabled is not None:
            query = query.filter(Site.enabled.is_(enabled))
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Site.name.ilike(pattern), Site.url.ilike(pattern)))
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"id": Site.id, "name": Site.name, "url": Site.url, "created_at": Site.created_at},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, site_id, payload: SiteUpdate) -> Site:
        site = get_or_404(db, Site, site_id, detail="Site not found")
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(site, field, value)
        db.commit()
        db.refresh(site)
        logger.info("Updated site %s", site.id)
        return site

    @staticmethod
    def copy(db: Session, site_id, created_by: int | None = None) -> Site:
        source = get_or_404(db, Site, site_id, detail="Site not found")
        site = Site(
            name=f"{source.name} (copy)",
            url=source.url,
            enabled=False,
            config=dict(source.config or {}),
            created_by=created_by,
        )
        db.add(site)
        db.commit()
        db.refresh(site)
        logger.info("Copied site %s to %s", source.id, site.id)
        return site

    @staticmethod
    def delete(db: Session, site_id) -> None:
        site = get_or_404(db, Site, site_id, detail="Site not found")
        db.delete(site)
        db.commit()
        logger.info("Deleted site %s", site_id)


sites = Sites()

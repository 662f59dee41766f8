"""Page state for the admin Sites screens."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.site import Site
from app.services.common import coerce_id
from app.services.flash import FlashStore, form_cache_key
from app.services.sites import CONNECTION_ERROR_FLASH, CURL_ERROR_FLASH, HTTP_CODE_FLASH, sites
from app.services.toolbar import BROWSE_BUTTONS, FORM_BUTTONS, Toolbar, build_toolbar

SITES_VIEW = "sites"

BROWSE_TITLE = "Sites"
ADD_TITLE = "Add Site"
EDIT_TITLE = "Edit Site"


def _as_int(value) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _site_form(site: Site | None) -> dict:
    if site is None:
        return {"id": 0, "name": "", "url": "", "enabled": True}
    return {"id": site.id or 0, "name": site.name, "url": site.url, "enabled": bool(site.enabled)}


class SitesHtmlView:
    """Builds the toolbar and view state for browse, add and edit.

    The connection diagnostics come from the previous, failed save attempt
    and are read from flash exactly once.
    """

    def __init__(self, db: Session, flash: FlashStore):
        self.db = db
        self.flash = flash
        self.toolbar = Toolbar()
        self.items: list[Site] = []
        self.item: Site | None = None
        self.form: dict = _site_form(None)
        self.connection_error: str | None = None
        self.http_code: int | None = None
        self.curl_error: str | None = None

    def on_before_browse(self, search: str | None = None, limit: int = 50, offset: int = 0) -> bool:
        self.toolbar = build_toolbar(BROWSE_TITLE, BROWSE_BUTTONS)
        self.items = sites.list(self.db, search=search, limit=limit, offset=offset)
        return True

    def on_before_add(self) -> bool:
        self.toolbar = build_toolbar(ADD_TITLE, FORM_BUTTONS)
        self.item = Site(name="", url="", enabled=True, config={})
        self._load_form_state()
        return True

    def on_before_edit(self, site_id) -> bool:
        self.toolbar = build_toolbar(EDIT_TITLE, FORM_BUTTONS)
        self.item = sites.get(self.db, site_id)
        self._load_form_state()
        return True

    def _load_form_state(self) -> None:
        self.form = _site_form(self.item)
        cached = self.flash.get_flash(form_cache_key(SITES_VIEW), None)
        if isinstance(cached, dict) and coerce_id(cached.get("id")) == self.form["id"]:
            self.form.update({key: value for key, value in cached.items() if key in self.form})
        self.connection_error = self.flash.get_flash(CONNECTION_ERROR_FLASH, None)
        self.http_code = _as_int(self.flash.get_flash(HTTP_CODE_FLASH, None))
        self.curl_error = self.flash.get_flash(CURL_ERROR_FLASH, None)

    def context(self) -> dict:
        return {
            "toolbar": self.toolbar,
            "items": self.items,
            "item": self.item,
            "form": self.form,
            "connection_error": self.connection_error,
            "http_code": self.http_code,
            "curl_error": self.curl_error,
        }

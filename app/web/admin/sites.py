"""Admin sites web routes."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.config import settings
from app.db import get_db
from app.models.user import User
from app.schemas.site import SiteCreate, SiteUpdate
from app.services import web_admin as web_admin_service
from app.services.acl import acl_check
from app.services.common import coerce_id
from app.services.flash import FlashStore, form_cache_key, get_flash_store
from app.services.routing import route
from app.services.sites import (
    CONNECTION_ERROR_FLASH,
    CURL_ERROR_FLASH,
    HTTP_CODE_FLASH,
    SiteConnectionError,
    sites as sites_service,
)
from app.services.web_admin_sites import SITES_VIEW, SitesHtmlView
from app.web.auth.dependencies import require_web_auth

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=settings.templates_dir)
router = APIRouter(prefix="/sites", tags=["web-admin-sites"])


def _form_str(value: object | None) -> str:
    return value.strip() if isinstance(value, str) else ""


def _form_bool(value: object | None) -> bool:
    return _form_str(value).lower() in {"1", "true", "yes", "on"}


def _browse_url() -> str:
    return route(f"index.php?view={SITES_VIEW}")


def _form_url(site_id: int) -> str:
    if site_id:
        return route(f"index.php?view={SITES_VIEW}&task=edit&id={site_id}")
    return route(f"index.php?view={SITES_VIEW}&task=add")


def _validation_message(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return "; ".join(messages) or "The site data is invalid."


def _selected_ids(form) -> list[int]:
    ids = [coerce_id(value) for value in form.getlist("cid")]
    if not ids and form.get("id"):
        ids = [coerce_id(form.get("id"))]
    return [site_id for site_id in ids if site_id]


def _render(request: Request, template: str, view: SitesHtmlView, flash: FlashStore):
    context = web_admin_service.build_admin_context(request, flash, active_page="sites", **view.context())
    return templates.TemplateResponse(request, template, context)


@router.get("", response_class=HTMLResponse)
def sites_list(
    request: Request,
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
    user: User = Depends(require_web_auth),
    db: Session = Depends(get_db),
):
    acl_check(user, SITES_VIEW, "browse")
    flash = get_flash_store(request)
    view = SitesHtmlView(db, flash)
    view.on_before_browse(search=search, limit=limit, offset=offset)
    return _render(request, "admin/sites/default.html", view, flash)


@router.post("")
async def sites_list_task(
    request: Request,
    user: User = Depends(require_web_auth),
    db: Session = Depends(get_db),
):
    """Handle the toolbar buttons of the sites list."""
    form = await request.form()
    task = _form_str(form.get("task")) or "browse"
    acl_check(user, SITES_VIEW, task)
    flash = get_flash_store(request)
    ids = _selected_ids(form)

    if task == "add":
        return RedirectResponse(url=_form_url(0), status_code=303)
    if task == "edit":
        if not ids:
            flash.enqueue_message("Please select a site to edit.", "warning")
            return RedirectResponse(url=_browse_url(), status_code=303)
        return RedirectResponse(url=_form_url(ids[0]), status_code=303)
    if task == "copy":
        for site_id in ids:
            sites_service.copy(db, site_id, created_by=user.id)
        flash.enqueue_message(f"{len(ids)} site(s) copied.", "info")
    elif task == "remove":
        for site_id in ids:
            sites_service.delete(db, site_id)
        flash.enqueue_message(f"{len(ids)} site(s) deleted.", "info")
    return RedirectResponse(url=_browse_url(), status_code=303)


@router.get("/add", response_class=HTMLResponse)
def site_add(
    request: Request,
    user: User = Depends(require_web_auth),
    db: Session = Depends(get_db),
):
    acl_check(user, SITES_VIEW, "add")
    flash = get_flash_store(request)
    view = SitesHtmlView(db, flash)
    view.on_before_add()
    return _render(request, "admin/sites/form.html", view, flash)


@router.get("/{site_id}/edit", response_class=HTMLResponse)
def site_edit(
    request: Request,
    site_id: int,
    user: User = Depends(require_web_auth),
    db: Session = Depends(get_db),
):
    acl_check(user, SITES_VIEW, "edit")
    flash = get_flash_store(request)
    view = SitesHtmlView(db, flash)
    view.on_before_edit(site_id)
    return _render(request, "admin/sites/form.html", view, flash)


@router.post("/save")
async def site_save(
    request: Request,
    user: User = Depends(require_web_auth),
    db: Session = Depends(get_db),
):
    form = await request.form()
    task = _form_str(form.get("task")) or "save"
    site_id = coerce_id(form.get("id"))
    acl_check(user, SITES_VIEW, task)
    flash = get_flash_store(request)

    if task == "cancel":
        return RedirectResponse(url=_browse_url(), status_code=303)
    acl_check(user, SITES_VIEW, "edit" if site_id else "add")

    data = {
        "id": site_id,
        "name": _form_str(form.get("name")),
        "url": _form_str(form.get("url")),
        "enabled": _form_bool(form.get("enabled")),
    }

    def _fail(message: str):
        flash.set_flash(form_cache_key(SITES_VIEW), data)
        flash.enqueue_message(message, "error")
        return RedirectResponse(url=_form_url(site_id), status_code=303)

    try:
        if site_id:
            sites_service.get(db, site_id)
            payload = SiteUpdate(
                name=data["name"],
                url=data["url"],
                enabled=data["enabled"],
                modified_by=user.id,
            )
        else:
            payload = SiteCreate(
                name=data["name"],
                url=data["url"],
                enabled=data["enabled"],
                created_by=user.id,
            )
    except ValidationError as exc:
        return _fail(_validation_message(exc))

    checker = getattr(request.app.state, "site_connection_checker", None)
    if checker is not None:
        try:
            checker(payload)
        except SiteConnectionError as exc:
            logger.info("Connection test failed for %s: %s", data["url"], exc.detail)
            flash.set_flash(CONNECTION_ERROR_FLASH, exc.detail)
            flash.set_flash(HTTP_CODE_FLASH, exc.http_code)
            flash.set_flash(CURL_ERROR_FLASH, exc.curl_error)
            return _fail(exc.detail)

    if site_id:
        site = sites_service.update(db, site_id, payload)
    else:
        site = sites_service.create(db, payload)
    flash.enqueue_message("The site has been saved.", "info")

    if task == "apply":
        return RedirectResponse(url=_form_url(site.id), status_code=303)
    return RedirectResponse(url=_browse_url(), status_code=303)

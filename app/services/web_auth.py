"""Service helpers for web auth routes."""

import logging
from urllib.parse import urlparse

from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from app.config import settings
from app.services.flash import FlashStore
from app.services.user_manager import user_manager
from app.web.auth.dependencies import SESSION_USER_KEY

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=settings.templates_dir)

DEFAULT_LANDING = "/admin/sites"


def _safe_next(next_url: str | None, fallback: str = DEFAULT_LANDING) -> str:
    if not next_url or not next_url.startswith("/") or next_url.startswith("//"):
        return fallback
    parsed = urlparse(next_url)
    if parsed.scheme or parsed.netloc:
        return fallback
    return next_url


def login_page(request: Request, error: str | None = None, next_url: str | None = None, status_code: int = 200):
    flash = FlashStore(request.session)
    return templates.TemplateResponse(
        request,
        "auth/login.html",
        {"error": error, "next": next_url or "", "messages": flash.pop_messages()},
        status_code=status_code,
    )


def login_submit(request: Request, db: Session, *, username: str, password: str, next_url: str | None = None):
    user = user_manager.authenticate(db, username or "", password or "")
    if user is None:
        return login_page(request, error="Invalid username or password.", next_url=next_url, status_code=400)
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id
    logger.info("User %s signed in", user.username)
    return RedirectResponse(url=_safe_next(next_url), status_code=303)


def logout(request: Request):
    user_id = request.session.get(SESSION_USER_KEY)
    request.session.clear()
    if user_id:
        logger.info("User %s signed out", user_id)
    return RedirectResponse(url="/login", status_code=303)

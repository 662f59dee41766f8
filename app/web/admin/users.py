"""Admin user management web routes."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from app.config import settings
from app.db import get_db
from app.models.user import KNOWN_PRIVILEGES, PRIVILEGE_PREFIX, SUPER_PRIVILEGE, User
from app.schemas.user import UserSaveForm
from app.services import web_admin as web_admin_service
from app.services.acl import acl_check, require_user_access
from app.services.avatar import get_avatar, get_avatar_edit_url
from app.services.common import coerce_id, get_or_404
from app.services.flash import form_cache_key, get_flash_store
from app.services.routing import route
from app.services.toolbar import BROWSE_BUTTONS, FORM_BUTTONS, build_toolbar
from app.services.user_manager import user_manager
from app.services.users import USERS_VIEW, UserValidationError, handle_failed_save, user_save_workflow
from app.web.auth.dependencies import require_web_auth

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=settings.templates_dir)
router = APIRouter(prefix="/users", tags=["web-admin-users"])

PRIVILEGE_CHOICES = [f"{PRIVILEGE_PREFIX}{key}" for key in KNOWN_PRIVILEGES]


def _form_str(value: object | None) -> str:
    return value if isinstance(value, str) else ""


def _user_form(user: User, editing_myself: bool = False) -> dict:
    permissions = user.granted_privileges()
    # Super inherited from a group must not look removed on your own form
    if editing_myself and user.get_privilege(SUPER_PRIVILEGE) and SUPER_PRIVILEGE not in permissions:
        permissions = sorted([*permissions, SUPER_PRIVILEGE])
    return {
        "id": user.id or 0,
        "username": user.username or "",
        "name": user.name or "",
        "email": user.email or "",
        "groups": user.usergroups,
        "permissions": permissions,
    }


def _form_context(request: Request, db: Session, actor: User, target: User, title: str) -> dict:
    flash = get_flash_store(request)
    editing_myself = target.id is not None and target.id == actor.id
    form = _user_form(target, editing_myself)
    cached = flash.get_flash(form_cache_key(USERS_VIEW), None)
    if isinstance(cached, dict) and coerce_id(cached.get("id")) == (target.id or 0):
        form.update({key: value for key, value in cached.items() if key in form})
    return web_admin_service.build_admin_context(
        request,
        flash,
        active_page="users",
        toolbar=build_toolbar(title, FORM_BUTTONS),
        item=target,
        form=form,
        groups=user_manager.list_groups(db),
        privilege_choices=PRIVILEGE_CHOICES,
        can_edit_privileges=actor.get_privilege(SUPER_PRIVILEGE),
        editing_myself=editing_myself,
    )


def _after_save_url(actor: User, saved: User, task: str) -> str:
    if task == "apply":
        return route(f"index.php?view={USERS_VIEW}&task=edit&id={saved.id}")
    if actor.get_privilege(SUPER_PRIVILEGE):
        return route(f"index.php?view={USERS_VIEW}")
    return route(f"index.php?view={USERS_VIEW}&task=read&id={actor.id}")


@router.get("", response_class=HTMLResponse)
def users_list(
    request: Request,
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
    user: User = Depends(require_web_auth),
    db: Session = Depends(get_db),
):
    acl_check(user, USERS_VIEW, "browse")
    flash = get_flash_store(request)
    items = user_manager.list(db, search=search, limit=limit, offset=offset)
    toolbar = build_toolbar("Users", [button for button in BROWSE_BUTTONS if button["title"] in {"Add", "Edit"}])
    context = web_admin_service.build_admin_context(
        request,
        flash,
        active_page="users",
        toolbar=toolbar,
        items=items,
        avatars={item.id: get_avatar(item, 32) for item in items},
        search=search or "",
    )
    return templates.TemplateResponse(request, "admin/users/default.html", context)


@router.post("")
async def users_list_task(
    request: Request,
    user: User = Depends(require_web_auth),
):
    """Handle the toolbar buttons of the users list."""
    form_data = await request.form()
    task = _form_str(form_data.get("task")).strip() or "browse"
    acl_check(user, USERS_VIEW, task)
    if task == "add":
        return RedirectResponse(url=route(f"index.php?view={USERS_VIEW}&task=add"), status_code=303)
    ids = [user_id for user_id in (coerce_id(value) for value in form_data.getlist("cid")) if user_id]
    if task == "edit" and ids:
        return RedirectResponse(url=route(f"index.php?view={USERS_VIEW}&task=edit&id={ids[0]}"), status_code=303)
    if task == "edit":
        get_flash_store(request).enqueue_message("Please select a user to edit.", "warning")
    return RedirectResponse(url=route(f"index.php?view={USERS_VIEW}"), status_code=303)


@router.get("/add", response_class=HTMLResponse)
def user_add(
    request: Request,
    user: User = Depends(require_web_auth),
    db: Session = Depends(get_db),
):
    acl_check(user, USERS_VIEW, "add")
    target = user_manager.get_user(db)
    context = _form_context(request, db, user, target, "Add User")
    return templates.TemplateResponse(request, "admin/users/form.html", context)


@router.get("/{user_id}", response_class=HTMLResponse)
def user_read(
    request: Request,
    user_id: int,
    user: User = Depends(require_web_auth),
    db: Session = Depends(get_db),
):
    acl_check(user, USERS_VIEW, "read")
    require_user_access(user, user_id)
    target = get_or_404(db, User, user_id, detail="User not found")
    flash = get_flash_store(request)
    context = web_admin_service.build_admin_context(
        request,
        flash,
        active_page="users",
        item=target,
        avatar=get_avatar(target, 128),
        avatar_edit_url=get_avatar_edit_url(target),
    )
    return templates.TemplateResponse(request, "admin/users/read.html", context)


@router.get("/{user_id}/edit", response_class=HTMLResponse)
def user_edit(
    request: Request,
    user_id: int,
    user: User = Depends(require_web_auth),
    db: Session = Depends(get_db),
):
    acl_check(user, USERS_VIEW, "edit")
    require_user_access(user, user_id)
    target = get_or_404(db, User, user_id, detail="User not found")
    context = _form_context(request, db, user, target, "Edit User")
    return templates.TemplateResponse(request, "admin/users/form.html", context)


@router.post("/save")
async def user_save(
    request: Request,
    user: User = Depends(require_web_auth),
    db: Session = Depends(get_db),
):
    form_data = await request.form()
    task = _form_str(form_data.get("task")).strip() or "save"
    target_id = coerce_id(form_data.get("id"))

    acl_check(user, USERS_VIEW, task)
    if task == "cancel":
        return RedirectResponse(url=_after_save_url(user, user, "save"), status_code=303)
    if not target_id:
        acl_check(user, USERS_VIEW, "add")
    require_user_access(user, target_id)

    form = UserSaveForm(
        id=target_id,
        username=_form_str(form_data.get("username")).strip(),
        name=_form_str(form_data.get("name")).strip(),
        email=_form_str(form_data.get("email")).strip(),
        password=_form_str(form_data.get("password")),
        password2=_form_str(form_data.get("password2")),
        groups=[group_id for group_id in (coerce_id(value) for value in form_data.getlist("groups")) if group_id],
        permissions=[_form_str(value) for value in form_data.getlist("permissions") if _form_str(value)],
    )
    flash = get_flash_store(request)

    try:
        saved = user_save_workflow.apply_save(db, user, target_id, form, flash)
    except UserValidationError as exc:
        url = handle_failed_save(flash, form, exc, _form_str(form_data.get("returnurl")))
        return RedirectResponse(url=url, status_code=303)

    flash.enqueue_message("The user has been saved.", "info")
    return RedirectResponse(url=_after_save_url(user, saved, task), status_code=303)

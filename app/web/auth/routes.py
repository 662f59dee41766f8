from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from app.db import get_db
from app.services import web_auth as web_auth_service

router = APIRouter(tags=["web-auth"])


@router.get("/login", response_class=HTMLResponse)
def login(request: Request, next: str | None = None):
    return web_auth_service.login_page(request, next_url=next)


@router.post("/login", response_class=HTMLResponse)
def login_submit(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    next: str | None = Form(None),
    db: Session = Depends(get_db),
):
    return web_auth_service.login_submit(
        request,
        db,
        username=username,
        password=password,
        next_url=next,
    )


@router.get("/logout")
def logout(request: Request):
    return web_auth_service.logout(request)

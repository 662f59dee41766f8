"""Session-cookie authentication for the server-rendered admin pages."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.user import User
from app.services.user_manager import user_manager

SESSION_USER_KEY = "user_id"


def require_web_auth(request: Request, db: Session = Depends(get_db)) -> User:
    user_id = request.session.get(SESSION_USER_KEY)
    user = user_manager.get_user(db, user_id) if user_id else None
    if user is None or not user.id:
        request.session.pop(SESSION_USER_KEY, None)
        raise HTTPException(status_code=401, detail="Unauthorized")
    request.state.user = user
    return user

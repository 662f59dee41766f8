"""Admin web routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from app.web.admin.sites import router as sites_router
from app.web.admin.users import router as users_router
from app.web.auth.dependencies import require_web_auth

router = APIRouter(
    prefix="/admin",
    tags=["web-admin"],
    dependencies=[Depends(require_web_auth)],
)


@router.get("")
def admin_root():
    return RedirectResponse(url="/admin/sites", status_code=303)


# Include all admin sub-routers
router.include_router(sites_router)
router.include_router(users_router)

__all__ = ["router"]

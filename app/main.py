from fastapi import FastAPI
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from app.config import settings
from app.errors import register_error_handlers
from app.logging import configure_logging
from app.web import router as web_router

configure_logging()

app = FastAPI(title="Panopticon Admin")

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=settings.session_cookie_name,
    same_site="lax",
    https_only=settings.cookie_secure,
)
register_error_handlers(app)

# Optional callable used by the site save form to test the remote site.
# It receives the validated payload and raises SiteConnectionError on failure.
app.state.site_connection_checker = None

app.include_router(web_router)


@app.get("/health")
def health():
    return JSONResponse({"status": "ok"})


@app.get("/")
def index():
    return RedirectResponse(url="/admin", status_code=303)

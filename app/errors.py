"""Exception handlers shared by the admin web routes."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _wants_json(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return "application/json" in accept and "text/html" not in accept


def _error_page(status_code: int, detail: str) -> HTMLResponse:
    return HTMLResponse(
        '<div class="alert alert-danger" role="alert">'
        f"<h1>{status_code}</h1><p>{detail}</p>"
        "</div>",
        status_code=status_code,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 401 and not _wants_json(request):
        return RedirectResponse(url="/login", status_code=303)
    if exc.status_code == 403:
        logger.warning("Access denied for %s %s: %s", request.method, request.url.path, exc.detail)
    if _wants_json(request):
        return JSONResponse({"detail": exc.detail}, status_code=exc.status_code, headers=exc.headers)
    return _error_page(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    if _wants_json(request):
        return JSONResponse({"detail": exc.errors()}, status_code=422)
    return _error_page(422, "The submitted data is invalid.")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if _wants_json(request):
        return JSONResponse({"detail": "Internal Server Error"}, status_code=500)
    return _error_page(500, "Internal Server Error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

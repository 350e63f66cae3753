import logging
import os

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.app.api import (
    auth, users, suppliers, raw_materials, finished_goods, stock_movement, stock_transfer,
    deliveries, manufacturing, warehouses, reports, health, config, pages,
)
from backend.app.core.airtable import AirtableConfigError
from backend.app.core.config import settings
from backend.app.core.errors import ApiError, handle_api_error
from backend.app.core.guard import GuardRedirect
from backend.app.services.records import RecordNotFoundError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_TITLE, description=settings.APP_DESCRIPTION)

# CORS - uses configured origins (restricted in production)
allowed_origins = settings.ALLOWED_ORIGINS.split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers with /api prefix
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(suppliers.router, prefix="/api/suppliers", tags=["suppliers"])
app.include_router(raw_materials.router, prefix="/api/raw-materials", tags=["raw-materials"])
app.include_router(finished_goods.router, prefix="/api/finished-goods", tags=["finished-goods"])
app.include_router(stock_movement.router, prefix="/api/stock-movement", tags=["stock-movement"])
app.include_router(stock_transfer.router, prefix="/api/stock-transfer", tags=["stock-transfer"])
app.include_router(deliveries.router, prefix="/api/deliveries", tags=["deliveries"])
app.include_router(manufacturing.router, prefix="/api/manufacturing", tags=["manufacturing"])
app.include_router(warehouses.router, prefix="/api/warehouses", tags=["warehouses"])
app.include_router(reports.router, prefix="/api/reports", tags=["reports"])
app.include_router(health.router, prefix="/api/health", tags=["health"])
app.include_router(config.router, prefix="/api/config", tags=["config"])

# Pages are served outside /api
app.include_router(pages.router, tags=["pages"])

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
STATIC_DIR = os.path.join(BASE_DIR, "static")
app.mount("/static", StaticFiles(directory=STATIC_DIR, html=False), name="static_files")


def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api")


def _error_page(request: Request, status_code: int, message: str):
    return pages.render(request, "error.html", None, status_code=status_code, title="Error", message=message)


@app.exception_handler(GuardRedirect)
async def guard_redirect_handler(request: Request, exc: GuardRedirect):
    return RedirectResponse(exc.location, status_code=303)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    # Not-found errors already name the record; everything else gets the generic message for its status
    message = exc.message if isinstance(exc, RecordNotFoundError) else handle_api_error(exc)
    status_code = exc.status_code if 400 <= exc.status_code < 600 else 502
    if _is_api(request):
        return JSONResponse(status_code=status_code, content={"detail": message})
    return _error_page(request, status_code, message)


@app.exception_handler(AirtableConfigError)
async def airtable_config_handler(request: Request, exc: AirtableConfigError):
    logger.error("Records store is not configured: %s", exc)
    message = "The records store is not configured."
    if _is_api(request):
        return JSONResponse(status_code=503, content={"detail": message})
    return _error_page(request, 503, message)


@app.exception_handler(StarletteHTTPException)
async def page_http_exception_handler(request: Request, exc: StarletteHTTPException):
    if _is_api(request) or request.url.path.startswith("/static"):
        return await http_exception_handler(request, exc)
    return _error_page(request, exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = handle_api_error(ApiError(500, str(exc)))
    if _is_api(request):
        return JSONResponse(status_code=500, content={"detail": message})
    return _error_page(request, 500, message)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

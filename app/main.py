# app/main.py

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.exceptions import ShopifyServiceError
from app.core.logging_config import configure_logging
from app.core.security import get_current_username, require_auth
from app.core.templates import templates
from app.routes import bundles, health

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Starting Smart Bundle Creator for {settings.SHOPIFY_SHOP_URL or '<no shop configured>'} "
        f"(environment={settings.ENVIRONMENT}, API version {settings.SHOPIFY_API_VERSION})"
    )
    if not settings.SHOPIFY_SHOP_URL or not settings.SHOPIFY_ADMIN_API_ACCESS_TOKEN:
        logger.warning("Shopify credentials are not configured; bundle pages will fail until they are set")
    yield
    logger.info("Shutting down Smart Bundle Creator")

app = FastAPI(
    title="Smart Bundle Creator",
    debug=settings.DEBUG,
    lifespan=lifespan
)

# Add middleware to handle HTTPS behind proxy
@app.middleware("http")
async def proxy_headers_middleware(request: Request, call_next):
    forwarded_proto = request.headers.get("x-forwarded-proto")
    if forwarded_proto == "https":
        request.scope["scheme"] = "https"
    response = await call_next(request)
    return response

# Mount static files with proper path resolution
static_dir = os.path.join(os.path.dirname(__file__), "static")
app.mount("/static", StaticFiles(directory=static_dir), name="static")

# Include routers with authentication
app.include_router(bundles.router, dependencies=[require_auth()])
app.include_router(health.router)  # Health check should be accessible without auth


@app.get("/", dependencies=[Depends(get_current_username)])
async def root():
    return RedirectResponse(url="/app/bundles")


# --- Error handlers ---

@app.exception_handler(ShopifyServiceError)
async def shopify_error_handler(request: Request, exc: ShopifyServiceError):
    """A failed Shopify call fails the whole page with a single message"""
    logger.error(f"Shopify call failed while serving {request.method} {request.url.path}: {exc}")
    return templates.TemplateResponse(
        request,
        "errors/platform_error.html",
        {"message": str(exc).splitlines()[0] if str(exc) else "Shopify request failed"},
        status_code=502,
    )


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and "text/html" in request.headers.get("accept", ""):
        return templates.TemplateResponse(request, "errors/404.html", {}, status_code=404)
    return await http_exception_handler(request, exc)

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from catalog_api.core.config import get_settings
from catalog_api.core.errors import register_error_handlers
from catalog_api.core.logging_config import configure_logging
from catalog_api.db.create_tables import create_all
from catalog_api.routers import auth as auth_router
from catalog_api.routers import products as products_router

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, nosniff, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    create_all()
    logger.info("%s started (env=%s)", app.title, settings.app_env)
    yield


settings = get_settings()
app = FastAPI(title=settings.app_name, lifespan=lifespan)

allowed_cors = set(settings.cors_origins)
allowed_cors.add(settings.frontend_url)
if settings.app_env != "prod":
    allowed_cors.update(
        {
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        }
    )
allowed_cors = {origin for origin in allowed_cors if origin}
if allowed_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(allowed_cors),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )
app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
register_error_handlers(app)

app.include_router(auth_router.router)
app.include_router(products_router.router)


@app.get("/")
def root():
    return {"message": f"Welcome to {settings.app_name}"}


@app.get("/health")
def health():
    return {"ok": True}


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn."""
    return app

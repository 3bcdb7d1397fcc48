# somahsap/main.py
import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi.errors import RateLimitExceeded

from somahsap.auth.deps import AdminUnauthorized
from somahsap.core.errors import (
    ConfigurationError,
    ContentValidationError,
    InvalidContentError,
    MailError,
    StorageError,
)
from somahsap.core.logging_config import logger, setup_logging
from somahsap.core.rate_limit import build_limiter
from somahsap.core.settings import Settings, get_settings
from somahsap.dependencies import Services
from somahsap.observability.metrics import router as metrics_router
from somahsap.routers import admin_auth, admin_content, admin_leads, admin_mailbox, admin_upload, contact


def _error(status_code: int, error: str, headers: Optional[dict] = None, **extra) -> JSONResponse:
    body = {"ok": False, "error": error}
    body.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(body, status_code=status_code, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AdminUnauthorized)
    def unauthorized_handler(request: Request, exc: AdminUnauthorized):
        return _error(401, "unauthorized")

    @app.exception_handler(ContentValidationError)
    def validation_handler(request: Request, exc: ContentValidationError):
        return _error(400, str(exc), details=exc.details)

    @app.exception_handler(InvalidContentError)
    def bad_content_handler(request: Request, exc: InvalidContentError):
        logger.error("bad_content", path=request.url.path, error=str(exc))
        return _error(500, "bad-content", headers={"cache-control": "no-store"})

    @app.exception_handler(StorageError)
    def storage_handler(request: Request, exc: StorageError):
        logger.error("storage_error", path=request.url.path, error=str(exc))
        return _error(
            500,
            "storage",
            headers={"x-admin-error": "storage-exception", "cache-control": "no-store"},
        )

    @app.exception_handler(ConfigurationError)
    def config_handler(request: Request, exc: ConfigurationError):
        logger.error("configuration_missing", path=request.url.path, missing=exc.missing)
        return _error(
            500,
            "missing-env",
            headers={"x-admin-error": "missing-env", "x-admin-missing": ",".join(exc.missing)},
        )

    @app.exception_handler(MailError)
    def mail_handler(request: Request, exc: MailError):
        return _error(502, "Mail gönderilemedi.", message=str(exc))

    @app.exception_handler(RateLimitExceeded)
    def ratelimit_handler(request: Request, exc: RateLimitExceeded):
        return PlainTextResponse(str(exc), status_code=429)

    @app.exception_handler(Exception)
    def unexpected_handler(request: Request, exc: Exception):
        logger.exception("unhandled_exception", path=request.url.path)
        return _error(500, "exception", message=type(exc).__name__)


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    # ----------------------------------------------------
    # App init
    # ----------------------------------------------------
    app = FastAPI(title="SOM Ahşap API", version="0.1.0")
    app.state.services = services or Services(settings)
    app.state.limiter = build_limiter(settings)

    # ----------------------------------------------------
    # Health
    # ----------------------------------------------------
    @app.get("/health", include_in_schema=True)
    def health() -> dict:
        return {"status": "ok"}

    # ----------------------------------------------------
    # Logging middleware
    # ----------------------------------------------------
    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start = time.time()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        client_ip = request.client.host if request.client else "unknown"

        bound_logger = logger.bind(
            request_id=request_id,
            ip=client_ip,
            endpoint=str(request.url.path),
            method=request.method,
        )

        bound_logger.info("request_started")
        response = await call_next(request)
        latency_ms = round((time.time() - start) * 1000, 2)

        response.headers["X-Request-ID"] = request_id
        bound_logger.bind(status_code=response.status_code, latency_ms=latency_ms).info(
            "request_finished"
        )
        return response

    # ----------------------------------------------------
    # Middleware
    # ----------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # ----------------------------------------------------
    # Routers
    # ----------------------------------------------------
    app.include_router(admin_auth.router)
    app.include_router(admin_content.router)
    app.include_router(admin_leads.router)
    app.include_router(admin_mailbox.router)
    app.include_router(admin_upload.router)
    app.include_router(contact.build_router(app.state.limiter, settings.RATE_LIMIT_CONTACT))
    app.include_router(metrics_router)  # /metrics

    logger.info(
        "startup",
        service="somahsap-api",
        env=settings.APP_ENV,
        content_backend=settings.CONTENT_BACKEND,
        secrets_backend=settings.SECRETS_BACKEND,
    )
    return app


app = create_app()

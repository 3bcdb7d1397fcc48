# somahsap/routers/admin_auth.py
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from somahsap.auth.session import create_session_token, verify_password
from somahsap.core.logging_config import get_logger
from somahsap.dependencies import Services, get_services
from somahsap.infra.secrets import ADMIN_PASSWORD, ADMIN_SECRET
from somahsap.observability.metrics import login_counter

router = APIRouter(prefix="/api/admin", tags=["admin-auth"])
logger = get_logger(__name__)

LOGIN_PATH = "/admin/login"
ADMIN_HOME = "/admin"


def public_origin(request: Request, fallback: str) -> str:
    """Origin zoals de browser hem ziet (achter CloudFront/ALB via x-forwarded-*)."""
    proto = (request.headers.get("x-forwarded-proto") or "https").split(",")[0].strip() or "https"
    host_header = request.headers.get("x-forwarded-host") or request.headers.get("host")
    host = (host_header or "").split(",")[0].strip()
    if host:
        return f"{proto}://{host}"
    return fallback.rstrip("/")


def _redirect(request: Request, services: Services, path: str) -> RedirectResponse:
    origin = public_origin(request, services.settings.PUBLIC_BASE_URL)
    return RedirectResponse(url=f"{origin}{path}", status_code=307)


@router.post("/login")
def login(
    request: Request,
    password: str = Form(""),
    services: Services = Depends(get_services),
):
    secrets = services.secrets.get_many([ADMIN_PASSWORD, ADMIN_SECRET])
    missing = [name for name, value in secrets.items() if not value]
    if missing:
        # configuratiefout: apart zichtbaar maken, niet als "fout wachtwoord"
        logger.warning("admin_env_missing", missing=missing)
        login_counter.labels(result="missing_env").inc()
        resp = _redirect(request, services, f"{LOGIN_PATH}?error=missing-env")
        resp.headers["x-admin-missing"] = ",".join(missing)
        return resp

    if not password.strip():
        return _redirect(request, services, f"{LOGIN_PATH}?error=required")

    if not verify_password(password, secrets[ADMIN_PASSWORD]):
        logger.info("admin_login_failed")
        login_counter.labels(result="invalid").inc()
        return _redirect(request, services, f"{LOGIN_PATH}?error=invalid-password")

    settings = services.settings
    token = create_session_token(secrets[ADMIN_SECRET], days=settings.ADMIN_SESSION_DAYS)

    resp = _redirect(request, services, ADMIN_HOME)
    resp.set_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        max_age=settings.session_max_age,
        path="/",
    )
    logger.info("admin_login_ok")
    login_counter.labels(result="success").inc()
    return resp


@router.post("/logout")
def logout(request: Request, services: Services = Depends(get_services)):
    if not services.secrets.get(ADMIN_SECRET):
        return _redirect(request, services, f"{LOGIN_PATH}?error=missing-env")

    settings = services.settings
    resp = _redirect(request, services, LOGIN_PATH)
    resp.set_cookie(
        key=settings.ADMIN_COOKIE_NAME,
        value="",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        max_age=0,
        path="/",
    )
    return resp

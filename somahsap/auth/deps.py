# somahsap/auth/deps.py
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from somahsap.auth.session import verify_session_token
from somahsap.dependencies import Services, get_services
from somahsap.infra.secrets import ADMIN_SECRET

# oudere deployments gebruikten deze cookienaam
LEGACY_COOKIE_NAME = "admin_session"


class AdminUnauthorized(Exception):
    """Geen (geldige) sessie: altijd 401, nooit 'standaard ingelogd'."""


@dataclass(frozen=True)
class AdminIdentity:
    username: str = "admin"
    auth_method: str = "session-cookie"


def _extract_token(request: Request, cookie_name: str) -> Optional[str]:
    return request.cookies.get(cookie_name) or request.cookies.get(LEGACY_COOKIE_NAME)


def require_admin(
    request: Request,
    services: Services = Depends(get_services),
) -> AdminIdentity:
    token = _extract_token(request, services.settings.ADMIN_COOKIE_NAME)
    if not token:
        raise AdminUnauthorized()

    secret = services.secrets.get(ADMIN_SECRET)
    if not verify_session_token(token, secret):
        raise AdminUnauthorized()

    return AdminIdentity()

# somahsap/auth/session.py
"""
Admin sessie zonder server-side state.

Token = base64url(JSON {"v": 1, "iat": ms, "exp": ms}) + "." + base64url(HMAC-SHA256)
Geldig zolang de handtekening klopt met het huidige ADMIN_SECRET en now < exp.
Intrekken kan alleen door te wachten of het secret te roteren.
"""
from __future__ import annotations

import hashlib
import hmac
import json
import time
from typing import Optional

from itsdangerous import BadData, BadSignature, Signer
from itsdangerous.encoding import base64_decode, base64_encode

SESSION_VERSION = 1
DEFAULT_SESSION_DAYS = 7
_DAY_MS = 24 * 60 * 60 * 1000


def _signer(secret: str) -> Signer:
    # key_derivation="none": HMAC direct met het secret, geen salt
    return Signer(secret, key_derivation="none", digest_method=hashlib.sha256)


def _now_ms(now: Optional[float]) -> int:
    return int((time.time() if now is None else now) * 1000)


def verify_password(candidate: str, expected: str) -> bool:
    """Constant-time vergelijking; lengteverschil = False, gooit nooit."""
    if candidate is None or expected is None:
        return False
    a = str(candidate).encode("utf-8")
    b = str(expected).encode("utf-8")
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a, b)


def create_session_token(secret: str, days: int = DEFAULT_SESSION_DAYS, now: Optional[float] = None) -> str:
    if not secret:
        raise ValueError("ADMIN_SECRET must be set to issue session tokens")
    issued = _now_ms(now)
    payload = {"v": SESSION_VERSION, "iat": issued, "exp": issued + days * _DAY_MS}
    data = base64_encode(json.dumps(payload, separators=(",", ":")))
    return _signer(secret).sign(data).decode("ascii")


def verify_session_token(token: Optional[str], secret: Optional[str], now: Optional[float] = None) -> bool:
    """Fail closed: elk defect token (segment mist, bad sig, geen JSON, geen exp) -> False."""
    if not token or not secret:
        return False
    try:
        data = _signer(secret).unsign(token)
        payload = json.loads(base64_decode(data))
    except (BadSignature, BadData, ValueError, UnicodeError):
        return False

    if not isinstance(payload, dict) or payload.get("v") != SESSION_VERSION:
        return False
    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return False
    return _now_ms(now) < exp

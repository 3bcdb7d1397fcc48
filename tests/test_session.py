import hashlib
import json

import pytest
from itsdangerous import Signer
from itsdangerous.encoding import base64_decode, base64_encode

from somahsap.auth.session import create_session_token, verify_password, verify_session_token

SECRET = "test-secret-0123456789abcdef"
T0 = 1_700_000_000.0
HOUR = 3600
DAY = 24 * HOUR


def _sign(payload_bytes: bytes, secret: str = SECRET) -> str:
    signer = Signer(secret, key_derivation="none", digest_method=hashlib.sha256)
    return signer.sign(base64_encode(payload_bytes)).decode("ascii")


# -------------------------
# Token
# -------------------------
def test_token_shape():
    token = create_session_token(SECRET, now=T0)
    data, sig = token.split(".")
    payload = json.loads(base64_decode(data))

    assert payload["v"] == 1
    assert payload["iat"] == int(T0 * 1000)
    assert payload["exp"] - payload["iat"] == 7 * DAY * 1000
    assert "=" not in token


def test_valid_within_lifetime():
    token = create_session_token(SECRET, now=T0)
    assert verify_session_token(token, SECRET, now=T0 + HOUR) is True


def test_expired_after_lifetime():
    token = create_session_token(SECRET, now=T0)
    assert verify_session_token(token, SECRET, now=T0 + 8 * DAY) is False
    # precies op exp telt als verlopen
    assert verify_session_token(token, SECRET, now=T0 + 7 * DAY) is False


def test_custom_lifetime():
    token = create_session_token(SECRET, days=1, now=T0)
    assert verify_session_token(token, SECRET, now=T0 + 2 * DAY) is False


def test_rotated_secret_invalidates():
    token = create_session_token(SECRET, now=T0)
    assert verify_session_token(token, "ander-secret", now=T0 + HOUR) is False


def test_tampered_signature():
    token = create_session_token(SECRET, now=T0)
    data, sig = token.split(".")
    # eerste teken: de laatste base64-tekens bevatten opvulbits
    first = "A" if sig[0] != "A" else "B"
    forged = f"{data}.{first}{sig[1:]}"
    assert verify_session_token(forged, SECRET, now=T0 + HOUR) is False


def test_tampered_payload():
    token = create_session_token(SECRET, now=T0)
    _, sig = token.split(".")
    forged = base64_encode(json.dumps({"v": 1, "iat": 0, "exp": 10**15}).encode()).decode()
    assert verify_session_token(f"{forged}.{sig}", SECRET, now=T0) is False


@pytest.mark.parametrize("token", ["", None, "zonderpunt", "a.b", "a.b.c", ".", "%%%.%%%"])
def test_malformed_tokens(token):
    assert verify_session_token(token, SECRET, now=T0) is False


@pytest.mark.parametrize("secret", ["", None])
def test_missing_secret_fails_closed(secret):
    token = create_session_token(SECRET, now=T0)
    assert verify_session_token(token, secret, now=T0) is False


@pytest.mark.parametrize(
    "payload",
    [
        b"geen json",
        b"[1, 2]",
        json.dumps({"v": 2, "iat": 0, "exp": 10**15}).encode(),
        json.dumps({"v": 1, "iat": 0}).encode(),
        json.dumps({"v": 1, "iat": 0, "exp": "99999999999999"}).encode(),
        json.dumps({"v": 1, "iat": 0, "exp": True}).encode(),
    ],
)
def test_correctly_signed_but_bad_payload(payload):
    assert verify_session_token(_sign(payload), SECRET, now=T0) is False


def test_create_requires_secret():
    with pytest.raises(ValueError):
        create_session_token("")


# -------------------------
# Wachtwoord
# -------------------------
@pytest.mark.parametrize(
    "candidate,expected,result",
    [
        ("cevizmeşe-2024", "cevizmeşe-2024", True),
        ("cevizmese-2024", "cevizmeşe-2024", False),
        ("kort", "cevizmeşe-2024", False),
        ("", "cevizmeşe-2024", False),
        ("abc", "abd", False),
    ],
)
def test_verify_password(candidate, expected, result):
    assert verify_password(candidate, expected) is result


def test_verify_password_never_raises_on_none():
    assert verify_password(None, "x") is False
    assert verify_password("x", None) is False

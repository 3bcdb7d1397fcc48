import copy
import json
import os
import time
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Dummy env zodat boto3 niet zeurt over credentials/regio
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-central-1")

from somahsap.auth.session import create_session_token
from somahsap.core.settings import Settings
from somahsap.dependencies import Services
from somahsap.infra.secrets import EnvSecretsProvider
from somahsap.main import create_app

SEED_CONTENT = Path(__file__).resolve().parent.parent / "data" / "content.json"

ADMIN_ENV = {
    "ADMIN_PASSWORD": "cevizmeşe-2024",
    "ADMIN_SECRET": "test-secret-0123456789abcdef",
}


@pytest.fixture
def anyio_backend():
    # Dwing anyio om alleen asyncio te gebruiken (geen Trio nodig)
    return "asyncio"


class RecordingTransport:
    """Vervangt smtp_send: onthoudt berichten, kan falen of traag zijn."""

    def __init__(self):
        self.sent = []
        self.error = None
        self.delay = 0.0

    def __call__(self, config, msg, timeout):
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.sent.append((config, msg))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        APP_ENV="local",
        DATA_DIR=tmp_path / "data",
        UPLOAD_DIR=tmp_path / "uploads",
        CONTENT_BACKEND="local",
        SECRETS_BACKEND="env",
        ADMIN_COOKIE_SECURE=False,
        RATE_LIMIT_ENABLED=False,
        SMTP_HOST="smtp.somahsap.com",
        SMTP_PORT="465",
        SMTP_USER="site@somahsap.com",
        SMTP_PASS="smtp-pass",
        MAIL_FROM="site@somahsap.com",
        MAIL_TO="info@somahsap.com",
        MAIL_TIMEOUT_SECONDS=2.0,
    )


@pytest.fixture
def transport():
    return RecordingTransport()


def build_services(settings, transport, environ=None) -> Services:
    secrets = EnvSecretsProvider(environ=dict(ADMIN_ENV if environ is None else environ))
    services = Services(settings, secrets=secrets)
    services.mailer.transport = transport
    return services


@pytest.fixture
def services(settings, transport):
    return build_services(settings, transport)


@pytest.fixture
def client(settings, services):
    app = create_app(settings, services)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client):
    token = create_session_token(ADMIN_ENV["ADMIN_SECRET"])
    client.cookies.set("admin", token)
    return client


@pytest.fixture
def valid_content():
    return copy.deepcopy(json.loads(SEED_CONTENT.read_text(encoding="utf-8")))


@pytest.fixture
def quote_form():
    return {
        "type": "quote",
        "email": "ayse.kaya@firma.com.tr",
        "phone": "+90 532 555 12 34",
        "usageArea": "Merdiven",
        "woodType": "Meşe",
        "thicknessMm": 40,
        "quality": "AB",
        "lengthMm": 1200,
        "widthMm": 300,
        "quantity": 14,
        "notes": "Basamaklar yağlı olsun.",
        "consent": True,
    }

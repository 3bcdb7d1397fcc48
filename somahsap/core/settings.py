# somahsap/core/settings.py
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === Algemene app settings ===
    APP_ENV: str = "local"  # local | development | production
    PUBLIC_BASE_URL: str = "https://somahsap.com"
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # === Data (JSON documenten) ===
    DATA_DIR: Path = Field(Path("data"), description="Map met content/leads/mailbox JSON")
    CONTENT_BACKEND: Literal["local", "s3"] = "local"
    ADMIN_CONTENT_BUCKET: Optional[str] = None
    ADMIN_CONTENT_KEY: Optional[str] = None
    AWS_REGION: str = "eu-central-1"

    # === Secrets ===
    SECRETS_BACKEND: Literal["env", "ssm", "secretsmanager"] = "env"
    SECRETS_SSM_PREFIX: str = ""  # bv. "/amplify/<app-id>/main/"
    SECRETS_MANAGER_ID: str = "som/admin"
    SECRETS_CACHE_TTL_SECONDS: float = 60.0

    # === Admin sessie ===
    ADMIN_COOKIE_NAME: str = "admin"
    ADMIN_COOKIE_SECURE: Optional[bool] = None  # None -> alleen in production
    ADMIN_SESSION_DAYS: int = 7

    # === E-mail (fallback als mailbox.json leeg is) ===
    SMTP_HOST: str = ""
    SMTP_PORT: str = ""
    SMTP_SECURE: Optional[bool] = None
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    MAIL_FROM: str = ""
    MAIL_TO: str = ""
    MAIL_TIMEOUT_SECONDS: float = 8.0

    # === Uploads ===
    UPLOAD_DIR: Path = Path("public/uploads")
    UPLOAD_URL_PREFIX: str = "/uploads"
    UPLOAD_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB
    THUMB_WIDTH: int = 800
    THUMB_QUALITY: int = 75

    # === Rate limiting ===
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_CONTACT: str = "10/minute"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def content_path(self) -> Path:
        return self.DATA_DIR / "content.json"

    @property
    def leads_path(self) -> Path:
        return self.DATA_DIR / "leads.json"

    @property
    def mailbox_path(self) -> Path:
        return self.DATA_DIR / "mailbox.json"

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() == "production"

    @property
    def cookie_secure(self) -> bool:
        if self.ADMIN_COOKIE_SECURE is not None:
            return self.ADMIN_COOKIE_SECURE
        return self.is_production

    @property
    def session_max_age(self) -> int:
        return self.ADMIN_SESSION_DAYS * 24 * 60 * 60


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance met simpele env-overrides."""
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.APP_ENV).lower()
    if env == "production":
        s.LOG_LEVEL = "WARNING"
    elif env == "development":
        s.LOG_LEVEL = "DEBUG"

    return s

# somahsap/services/mail_settings_store.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from somahsap.core.errors import ContentValidationError, StorageError
from somahsap.schemas.content import validation_details
from somahsap.schemas.mail_settings import MailSettings
from somahsap.services.storage import atomic_write_text, dump_json

logger = logging.getLogger(__name__)


def parse_mail_settings(value: Any) -> MailSettings:
    try:
        return MailSettings.model_validate(value)
    except ValidationError as e:
        raise ContentValidationError("invalid mail settings", validation_details(e)) from e


class MailSettingsStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> MailSettings:
        if not self.path.exists():
            atomic_write_text(self.path, dump_json(MailSettings().model_dump()))
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"mailbox read failed: {e}") from e
        return parse_mail_settings(data)

    def write(self, value: Any) -> MailSettings:
        settings = parse_mail_settings(value)
        atomic_write_text(self.path, dump_json(settings.model_dump()))
        # wachtwoord nooit loggen
        logger.info("mail settings written host=%s has_pass=%s", settings.smtpHost, bool(settings.smtpPass))
        return settings

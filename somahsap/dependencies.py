# somahsap/dependencies.py
from __future__ import annotations

import logging
import threading
from typing import Optional

from botocore.exceptions import BotoCoreError
from fastapi import Request

from somahsap.core.errors import ConfigurationError
from somahsap.core.settings import Settings
from somahsap.infra.secrets import SecretsProvider, build_secrets_provider
from somahsap.services.contact_intake import ContactIntake
from somahsap.services.content_store import ContentStore
from somahsap.services.lead_store import LeadStore
from somahsap.services.mail_settings_store import MailSettingsStore
from somahsap.services.mailer import Mailer
from somahsap.services.storage import DocumentBackend, build_content_backend
from somahsap.services.uploads import ImageUploads

logger = logging.getLogger(__name__)


class Services:
    """
    Alle stores/clients van één app-instantie, 1x opgebouwd bij create_app().
    De content-backend wordt pas bij eerste gebruik bepaald (S3-target kan uit
    de parameter store komen) en daarna op deze instantie bewaard.
    """

    def __init__(
        self,
        settings: Settings,
        secrets: Optional[SecretsProvider] = None,
        content_backend: Optional[DocumentBackend] = None,
        mailer: Optional[Mailer] = None,
    ):
        self.settings = settings
        self.secrets = secrets or build_secrets_provider(settings)
        self._content_backend = content_backend
        self._content_store: Optional[ContentStore] = None
        self._lock = threading.Lock()

        self.leads = LeadStore(settings.leads_path)
        self.mail_settings = MailSettingsStore(settings.mailbox_path)
        self.mailer = mailer or Mailer(settings, self.mail_settings)
        self.uploads = ImageUploads(
            settings.UPLOAD_DIR,
            url_prefix=settings.UPLOAD_URL_PREFIX,
            max_bytes=settings.UPLOAD_MAX_BYTES,
            thumb_width=settings.THUMB_WIDTH,
            thumb_quality=settings.THUMB_QUALITY,
        )

    @property
    def content(self) -> ContentStore:
        with self._lock:
            if self._content_store is None:
                backend = self._content_backend or build_content_backend(self.settings, self.secrets)
                self._content_store = ContentStore(backend)
            return self._content_store

    @property
    def intake(self) -> ContactIntake:
        return ContactIntake(self.leads, self.mailer, self.content_or_none())

    def content_or_none(self) -> Optional[ContentStore]:
        # publieke formulieren mogen niet falen op een ontbrekend content-target
        try:
            return self.content
        except (ConfigurationError, BotoCoreError) as e:
            logger.warning("content store unavailable: %s", e)
            return None


def get_services(request: Request) -> Services:
    return request.app.state.services

# somahsap/services/contact_intake.py
from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

import structlog

from somahsap.core.errors import (
    ConfigurationError,
    ContentValidationError,
    InvalidContentError,
    MailError,
    StorageError,
)
from somahsap.observability.metrics import contact_counter
from somahsap.schemas.contact import ContactBase, parse_contact
from somahsap.schemas.lead import LeadEntry
from somahsap.services.content_store import ContentStore
from somahsap.services.lead_store import LeadStore
from somahsap.services.mailer import Mailer
from somahsap.services.notifications import DEFAULT_SOURCE_NAME, render_notification

logger = structlog.get_logger(__name__)

FORM_TYPES = ("quote", "message", "quick")


@dataclass(frozen=True)
class IntakeResult:
    """Resultaat van een geldige inzending; delivery_error gezet = lead staat er wel."""

    lead: Optional[LeadEntry]
    dropped: bool = False
    delivery_error: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return self.delivery_error is None


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_lead(payload: ContactBase) -> LeadEntry:
    return LeadEntry(
        id=str(uuid.uuid4()),
        type=payload.type,
        email=str(payload.email),
        phone=payload.contact_phone,
        createdAt=_utc_now_iso(),
        payload=payload.lead_payload(),
        notes=payload.notes,
    )


class ContactIntake:
    """
    Formulier -> valideren -> lead opslaan -> notificatie mailen.
    De lead wordt eerst opgeslagen; een mislukte of te trage mail draait dat niet terug.
    """

    def __init__(self, leads: LeadStore, mailer: Mailer, content: Optional[ContentStore] = None):
        self.leads = leads
        self.mailer = mailer
        self.content = content

    def _source_name(self) -> str:
        if self.content is None:
            return DEFAULT_SOURCE_NAME
        try:
            c = self.content.read_optional()
        except (InvalidContentError, StorageError, ConfigurationError):
            return DEFAULT_SOURCE_NAME
        return (c.brand.name if c and c.brand.name else DEFAULT_SOURCE_NAME)

    async def submit(self, raw: Any) -> IntakeResult:
        try:
            payload = parse_contact(raw)
        except ContentValidationError:
            form_type = raw.get("type") if isinstance(raw, dict) else None
            if form_type not in FORM_TYPES:
                form_type = "unknown"
            contact_counter.labels(type=form_type, result="invalid").inc()
            raise
        log = logger.bind(form_type=payload.type)

        if payload.is_spam:
            # honeypot gevuld: doe alsof het gelukt is, maar bewaar/stuur niets
            log.info("contact_honeypot_dropped")
            contact_counter.labels(type=payload.type, result="dropped").inc()
            return IntakeResult(lead=None, dropped=True)

        lead = await asyncio.to_thread(self.leads.append, build_lead(payload))
        log = log.bind(lead_id=lead.id)

        source_name = await asyncio.to_thread(self._source_name)
        notification = render_notification(payload, source_name)
        try:
            await self.mailer.send(notification)
        except MailError as e:
            log.warning("contact_mail_failed", error=str(e))
            contact_counter.labels(type=payload.type, result="mail_failed").inc()
            return IntakeResult(lead=lead, delivery_error=str(e))

        log.info("contact_submitted")
        contact_counter.labels(type=payload.type, result="ok").inc()
        return IntakeResult(lead=lead)

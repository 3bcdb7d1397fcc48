# somahsap/services/mailer.py
from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Callable, Optional

from somahsap.core.errors import MailError, StorageError
from somahsap.schemas.mail_settings import MailSettings
from somahsap.services.mail_settings_store import MailSettingsStore
from somahsap.services.notifications import Notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailerConfig:
    smtp_host: str
    smtp_port: int
    smtp_secure: bool
    smtp_user: str
    smtp_pass: str
    mail_from: str
    mail_to: Optional[str] = None


def _norm(value) -> str:
    return (value or "").strip()


def resolve_mailer_config(stored: Optional[MailSettings], settings) -> MailerConfig:
    """mailbox.json (admin) gaat voor, env-settings zijn de fallback."""
    s = stored or MailSettings()

    host = _norm(s.smtpHost) or _norm(settings.SMTP_HOST)
    port_raw = _norm(s.smtpPort) or _norm(settings.SMTP_PORT)
    user = _norm(s.smtpUser) or _norm(settings.SMTP_USER)
    password = _norm(s.smtpPass) or _norm(settings.SMTP_PASS)
    mail_from = _norm(s.mailFrom) or _norm(settings.MAIL_FROM)
    mail_to = _norm(s.mailTo) or _norm(settings.MAIL_TO)

    try:
        port = int(port_raw)
    except ValueError:
        port = 0

    if not host:
        raise MailError("Missing mail config: SMTP_HOST")
    if port <= 0:
        raise MailError("Missing mail config: SMTP_PORT")
    if not user:
        raise MailError("Missing mail config: SMTP_USER")
    if not password:
        raise MailError("Missing mail config: SMTP_PASS")
    if not mail_from:
        raise MailError("Missing mail config: MAIL_FROM")

    # mailbox.json wint alleen als daar een host stond; anders env of poort 465
    if stored is not None and _norm(stored.smtpHost):
        secure = stored.smtpSecure or port == 465
    elif settings.SMTP_SECURE is not None:
        secure = settings.SMTP_SECURE
    else:
        secure = port == 465

    return MailerConfig(
        smtp_host=host,
        smtp_port=port,
        smtp_secure=secure,
        smtp_user=user,
        smtp_pass=password,
        mail_from=mail_from,
        mail_to=mail_to or None,
    )


def build_message(config: MailerConfig, notification: Notification, to: str) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = notification.subject
    msg["From"] = config.mail_from
    msg["To"] = to
    if notification.reply_to:
        msg["Reply-To"] = notification.reply_to
    msg.set_content(notification.text)
    msg.add_alternative(notification.html, subtype="html")
    return msg


def smtp_send(config: MailerConfig, msg: EmailMessage, timeout: float) -> None:
    if config.smtp_secure:
        server = smtplib.SMTP_SSL(
            config.smtp_host, config.smtp_port, timeout=timeout, context=ssl.create_default_context()
        )
    else:
        server = smtplib.SMTP(config.smtp_host, config.smtp_port, timeout=timeout)
    with server:
        if not config.smtp_secure:
            server.starttls(context=ssl.create_default_context())
        server.login(config.smtp_user, config.smtp_pass)
        server.send_message(msg)


class Mailer:
    """Stuurt notificaties naar het bedrijf; elke fout of timeout wordt MailError."""

    def __init__(
        self,
        settings,
        mail_settings: MailSettingsStore,
        transport: Callable[[MailerConfig, EmailMessage, float], None] = smtp_send,
    ):
        self.settings = settings
        self.mail_settings = mail_settings
        self.transport = transport

    def _stored_settings(self) -> Optional[MailSettings]:
        try:
            return self.mail_settings.read()
        except (StorageError, ValueError) as e:
            logger.warning("mailbox settings unreadable, using env fallback: %s", e)
            return None

    def _deliver(self, notification: Notification, to: Optional[str], timeout: float) -> str:
        # draait in een worker-thread: mailbox.json lezen en SMTP zijn blocking
        config = resolve_mailer_config(self._stored_settings(), self.settings)
        recipient = to or config.mail_to
        if not recipient:
            raise MailError("Missing mail config: MAIL_TO")
        self.transport(config, build_message(config, notification, recipient), timeout)
        return recipient

    async def send(self, notification: Notification, to: Optional[str] = None) -> None:
        timeout = self.settings.MAIL_TIMEOUT_SECONDS
        try:
            recipient = await asyncio.wait_for(
                asyncio.to_thread(self._deliver, notification, to, timeout),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise MailError("Mail gönderimi zaman aşımına uğradı.") from e
        except MailError:
            raise
        except (smtplib.SMTPException, OSError) as e:
            raise MailError(f"smtp_failed:{type(e).__name__}:{e}") from e

        logger.info("notification sent subject=%r to=%s", notification.subject, recipient)

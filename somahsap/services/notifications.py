# somahsap/services/notifications.py
from __future__ import annotations

from dataclasses import dataclass
from functools import singledispatch
from pathlib import Path
from typing import List, Mapping, Any, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, select_autoescape

from somahsap.schemas.contact import ContactBase, MessagePayload, QuickPayload, QuotePayload

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)

DEFAULT_SOURCE_NAME = "Web Sitesi"


@dataclass(frozen=True)
class Notification:
    subject: str
    text: str
    html: str
    reply_to: Optional[str] = None


def render_template(name: str, context: Mapping[str, Any]) -> str:
    template = _env.get_template(name)
    return template.render(**context).strip()


def base_text(payload: ContactBase, source_name: str) -> str:
    """Gedeelde voettekst: bron, e-mail, telefoon, notities."""
    parts = [
        f"Kaynak: {source_name} web formu",
        f"E-posta: {payload.email}",
        f"Telefon: {payload.contact_phone}" if payload.contact_phone else "",
        f"Açıklama: {payload.notes}" if payload.notes else "",
    ]
    return "\n".join(p for p in parts if p)


@singledispatch
def render_notification(payload: ContactBase, source_name: str = DEFAULT_SOURCE_NAME) -> Notification:
    raise TypeError(f"no notification renderer for {type(payload).__name__}")


@render_notification.register
def _(payload: QuotePayload, source_name: str = DEFAULT_SOURCE_NAME) -> Notification:
    subject = f"Teklif Talebi — {payload.usageArea} / {payload.woodType} / {payload.quality}"
    footer = base_text(payload, source_name)

    rows: List[Tuple[str, str]] = [
        ("Kullanım", payload.usageArea),
        ("Ahşap", payload.woodType),
        ("Kalınlık", f"{payload.thicknessMm} mm"),
        ("Kalite", payload.quality),
    ]
    if payload.lengthMm:
        rows.append(("Boy", f"{payload.lengthMm} mm"))
    if payload.widthMm:
        rows.append(("En", f"{payload.widthMm} mm"))
    if payload.quantity:
        rows.append(("Adet", str(payload.quantity)))
    area = payload.area_m2
    if area:
        rows.append(("Tahmini Alan", f"{area:.2f} m²"))

    lines = [
        subject,
        f"Kullanım Alanı: {payload.usageArea}",
        f"Ahşap Türü: {payload.woodType}",
        f"Kalınlık: {payload.thicknessMm} mm",
        f"Kalite: {payload.quality}",
    ]
    if payload.lengthMm:
        lines.append(f"Boy: {payload.lengthMm} mm")
    if payload.widthMm:
        lines.append(f"En: {payload.widthMm} mm")
    if payload.quantity:
        lines.append(f"Adet: {payload.quantity}")
    if area:
        lines.append(f"Tahmini Alan: {area:.2f} m²")
    lines.append(footer)

    html = render_template("email/quote.html", {"subject": subject, "rows": rows, "base_text": footer})
    return Notification(subject=subject, text="\n".join(lines), html=html, reply_to=str(payload.email))


@render_notification.register
def _(payload: MessagePayload, source_name: str = DEFAULT_SOURCE_NAME) -> Notification:
    subject = f"Yeni Mesaj — {payload.subject}"
    footer = base_text(payload, source_name)
    text = "\n".join(
        [
            subject,
            "",
            f"Ad Soyad: {payload.name}",
            f"Konu: {payload.subject}",
            "",
            payload.message,
            "",
            footer,
        ]
    )
    html = render_template("email/message.html", {"subject": subject, "p": payload, "base_text": footer})
    return Notification(subject=subject, text=text, html=html, reply_to=str(payload.email))


@render_notification.register
def _(payload: QuickPayload, source_name: str = DEFAULT_SOURCE_NAME) -> Notification:
    subject = "Hızlı İletişim Talebi"
    footer = base_text(payload, source_name)
    html = render_template("email/quick.html", {"subject": subject, "base_text": footer})
    return Notification(
        subject=subject, text="\n".join([subject, "", footer]), html=html, reply_to=str(payload.email)
    )

import smtplib

import pytest
from fastapi.testclient import TestClient

from somahsap.core.errors import ContentValidationError
from somahsap.main import create_app
from somahsap.schemas.contact import ContactBase, QuotePayload, parse_contact
from somahsap.services.notifications import render_notification

CONTACT = "/api/contact"


def _plain(msg):
    return msg.get_body(preferencelist=("plain",)).get_content()


def _html(msg):
    return msg.get_body(preferencelist=("html",)).get_content()


# -------------------------
# 1) Schema
# -------------------------
def test_parse_quote(quote_form):
    payload = parse_contact(quote_form)
    assert isinstance(payload, QuotePayload)
    assert payload.area_m2 == pytest.approx(5.04)


def test_area_needs_both_dimensions(quote_form):
    quote_form.pop("widthMm")
    assert parse_contact(quote_form).area_m2 is None


def test_area_defaults_quantity_to_one(quote_form):
    quote_form.pop("quantity")
    assert parse_contact(quote_form).area_m2 == pytest.approx(0.36)


@pytest.mark.parametrize(
    "change",
    [
        {"consent": False},
        {"consent": "true"},
        {"quality": "ZZ"},
        {"thicknessMm": 130},
        {"thicknessMm": 11},
        {"phone": "123"},
        {"email": "geen-adres"},
        {"lengthMm": 50},
        {"quantity": 101},
        {"thicknessMm": "40"},
        {"lengthMm": "1200"},
        {"quantity": "2"},
        {"thicknessMm": 40.5},
        {"type": "brochure"},
    ],
)
def test_invalid_quote_rejected(quote_form, change):
    quote_form.update(change)
    with pytest.raises(ContentValidationError):
        parse_contact(quote_form)


def test_base_form_is_abstract():
    with pytest.raises(TypeError):
        ContactBase(email="ali@firma.com.tr", consent=True)


def test_missing_consent_rejected(quote_form):
    quote_form.pop("consent")
    with pytest.raises(ContentValidationError) as ei:
        parse_contact(quote_form)
    assert any(d["loc"].endswith("consent") for d in ei.value.details)


def test_quote_notification_contents(quote_form):
    note = render_notification(parse_contact(quote_form), "SOM Ahşap")
    assert note.subject == "Teklif Talebi — Merdiven / Meşe / AB"
    assert "Tahmini Alan: 5.04 m²" in note.text
    assert "Kaynak: SOM Ahşap web formu" in note.text
    assert "Telefon: +90 532 555 12 34" in note.text
    assert "Açıklama: Basamaklar yağlı olsun." in note.text
    assert note.reply_to == "ayse.kaya@firma.com.tr"
    assert "<td" in note.html and "40 mm" in note.html


def test_message_notification_escapes_html():
    payload = parse_contact(
        {
            "type": "message",
            "email": "mehmet@firma.com.tr",
            "phone": "05321234567",
            "name": "Mehmet <b>Demir</b>",
            "subject": "Fiyat",
            "message": "Merhaba,\n<script>alert(1)</script> tezgah fiyatı?",
            "consent": True,
        }
    )
    note = render_notification(payload)
    assert note.subject == "Yeni Mesaj — Fiyat"
    assert "Kaynak: Web Sitesi web formu" in note.text
    assert "<script>" not in note.html
    assert "&lt;script&gt;" in note.html
    assert "<br/>" in note.html


# -------------------------
# 2) HTTP flow
# -------------------------
def test_quote_end_to_end(client, services, transport, quote_form, valid_content):
    services.content.write(valid_content)

    r = client.post(CONTACT, json=quote_form)
    assert r.status_code == 200
    assert r.json() == {"ok": True}

    leads = services.leads.list()
    assert len(leads) == 1
    lead = leads[0]
    assert lead.type == "quote"
    assert lead.email == "ayse.kaya@firma.com.tr"
    assert lead.phone == "+90 532 555 12 34"
    assert lead.payload["usageArea"] == "Merdiven"
    assert lead.payload["quality"] == "AB"
    assert lead.notes == "Basamaklar yağlı olsun."
    assert lead.createdAt.endswith("+00:00")

    assert len(transport.sent) == 1
    _, msg = transport.sent[0]
    assert "Merdiven" in msg["Subject"] and "Meşe" in msg["Subject"]
    assert msg["Reply-To"] == "ayse.kaya@firma.com.tr"
    assert msg["To"] == "info@somahsap.com"
    assert "Kaynak: SOM Ahşap web formu" in _plain(msg)
    assert "<table" in _html(msg)


def test_source_name_falls_back_without_content(client, transport, quote_form):
    assert client.post(CONTACT, json=quote_form).status_code == 200
    assert "Kaynak: Web Sitesi web formu" in _plain(transport.sent[0][1])


def test_honeypot_is_silently_dropped(client, services, transport, quote_form):
    quote_form["company"] = "Spam BV"
    r = client.post(CONTACT, json=quote_form)
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    assert services.leads.list() == []
    assert transport.sent == []


def test_honeypot_still_validates(client, services, quote_form):
    quote_form["company"] = "Spam BV"
    quote_form["consent"] = False
    assert client.post(CONTACT, json=quote_form).status_code == 400


def test_validation_error_is_400(client, services, transport, quote_form):
    quote_form["consent"] = False
    r = client.post(CONTACT, json=quote_form)
    assert r.status_code == 400
    body = r.json()
    assert body["ok"] is False
    assert body["error"] == "Form doğrulama hatası."
    assert body["details"]
    assert services.leads.list() == []
    assert transport.sent == []


def test_broken_json_is_400(client):
    r = client.post(CONTACT, content=b"{niet json", headers={"content-type": "application/json"})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid JSON body"


def test_mail_failure_keeps_lead(client, services, transport, quote_form):
    transport.error = smtplib.SMTPServerDisconnected("gone")
    r = client.post(CONTACT, json=quote_form)
    assert r.status_code == 502
    body = r.json()
    assert body["ok"] is False
    assert body["error"] == "Mail gönderilemedi."
    assert len(services.leads.list()) == 1


def test_mail_timeout_keeps_lead(client, services, transport, settings, quote_form):
    services.mailer.settings = settings.model_copy(update={"MAIL_TIMEOUT_SECONDS": 0.05})
    transport.delay = 0.5
    r = client.post(CONTACT, json=quote_form)
    assert r.status_code == 502
    assert "zaman aşımı" in r.json()["message"]
    assert len(services.leads.list()) == 1


def test_missing_mail_config_is_502(client, services, settings, quote_form):
    services.mailer.settings = settings.model_copy(update={"SMTP_HOST": ""})
    r = client.post(CONTACT, json=quote_form)
    assert r.status_code == 502
    assert r.json()["message"] == "Missing mail config: SMTP_HOST"
    assert len(services.leads.list()) == 1


def test_mailbox_settings_override_env(admin_client, transport, quote_form):
    r = admin_client.put(
        "/api/admin/mailbox",
        json={
            "smtpHost": "mail.firma.com.tr",
            "smtpPort": "587",
            "smtpSecure": False,
            "smtpUser": "web",
            "smtpPass": "pw",
            "mailFrom": "web@firma.com.tr",
            "mailTo": "satis@firma.com.tr",
        },
    )
    assert r.status_code == 200

    assert admin_client.post(CONTACT, json=quote_form).status_code == 200
    cfg, msg = transport.sent[0]
    assert cfg.smtp_host == "mail.firma.com.tr"
    assert cfg.smtp_secure is False
    assert msg["To"] == "satis@firma.com.tr"


def test_message_variant(client, services, transport):
    r = client.post(
        CONTACT,
        json={
            "type": "message",
            "email": "mehmet@firma.com.tr",
            "phone": "05321234567",
            "name": "Mehmet Demir",
            "subject": "Ceviz tezgah",
            "message": "Ceviz tezgah için fiyat alabilir miyim?",
            "consent": True,
        },
    )
    assert r.status_code == 200
    lead = services.leads.list()[0]
    assert lead.payload == {
        "name": "Mehmet Demir",
        "subject": "Ceviz tezgah",
        "message": "Ceviz tezgah için fiyat alabilir miyim?",
    }
    assert transport.sent[0][1]["Subject"] == "Yeni Mesaj — Ceviz tezgah"


def test_quick_variant(client, services, transport):
    r = client.post(CONTACT, json={"type": "quick", "email": "ali@firma.com.tr", "consent": True})
    assert r.status_code == 200
    lead = services.leads.list()[0]
    assert lead.type == "quick"
    assert lead.phone == ""
    assert lead.payload == {"source": "quick"}
    assert transport.sent[0][1]["Subject"] == "Hızlı İletişim Talebi"


def test_unknown_type_is_400(client):
    r = client.post(CONTACT, json={"type": "brochure", "email": "ali@firma.com.tr", "consent": True})
    assert r.status_code == 400


# -------------------------
# 3) Rate limit
# -------------------------
QUICK_BOT = {"type": "quick", "email": "ali@firma.com.tr", "consent": True, "company": "bot"}


def _limited(settings, limit="2/minute"):
    return settings.model_copy(update={"RATE_LIMIT_ENABLED": True, "RATE_LIMIT_CONTACT": limit})


def test_contact_rate_limited(settings, services):
    with TestClient(create_app(_limited(settings), services)) as c:
        codes = [c.post(CONTACT, json=QUICK_BOT).status_code for _ in range(3)]
    assert codes == [200, 200, 429]


def test_limit_comes_from_app_settings(settings, services):
    with TestClient(create_app(_limited(settings, "1/minute"), services)) as c:
        codes = [c.post(CONTACT, json=QUICK_BOT).status_code for _ in range(2)]
    assert codes == [200, 429]


def test_apps_keep_their_own_limiter(settings, services):
    limited_app = create_app(_limited(settings, "1/minute"), services)
    open_app = create_app(settings, services)

    assert limited_app.state.limiter is not open_app.state.limiter
    assert limited_app.state.limiter.enabled is True
    assert open_app.state.limiter.enabled is False

    with TestClient(limited_app) as c:
        assert [c.post(CONTACT, json=QUICK_BOT).status_code for _ in range(2)] == [200, 429]
    with TestClient(open_app) as c:
        assert [c.post(CONTACT, json=QUICK_BOT).status_code for _ in range(3)] == [200, 200, 200]

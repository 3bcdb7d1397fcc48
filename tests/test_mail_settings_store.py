import json

import pytest

from somahsap.core.errors import ContentValidationError
from somahsap.services.mail_settings_store import MailSettingsStore


def test_read_creates_defaults(tmp_path):
    path = tmp_path / "mailbox.json"
    settings = MailSettingsStore(path).read()

    assert settings.smtpHost == ""
    assert settings.smtpSecure is False
    assert json.loads(path.read_text(encoding="utf-8"))["smtpPort"] == ""


def test_write_then_read(tmp_path):
    store = MailSettingsStore(tmp_path / "mailbox.json")
    store.write(
        {
            "smtpHost": "mail.somahsap.com",
            "smtpPort": "587",
            "smtpSecure": False,
            "smtpUser": "bildirim@somahsap.com",
            "smtpPass": "xyz",
            "mailFrom": "bildirim@somahsap.com",
            "mailTo": "satis@somahsap.com",
        }
    )
    got = store.read()
    assert got.smtpHost == "mail.somahsap.com"
    assert got.mailTo == "satis@somahsap.com"


def test_partial_document_fills_defaults(tmp_path):
    store = MailSettingsStore(tmp_path / "mailbox.json")
    assert store.write({"smtpHost": "mail.somahsap.com"}).smtpPort == ""


def test_invalid_write_rejected_and_not_stored(tmp_path):
    path = tmp_path / "mailbox.json"
    store = MailSettingsStore(path)
    store.read()
    before = path.read_bytes()

    with pytest.raises(ContentValidationError) as ei:
        store.write({"smtpPort": 587, "smtpSecure": "misschien"})
    locs = {d["loc"] for d in ei.value.details}
    assert {"smtpPort", "smtpSecure"} <= locs
    assert path.read_bytes() == before

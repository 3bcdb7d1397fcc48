# somahsap/schemas/mail_settings.py
from pydantic import BaseModel


class MailSettings(BaseModel):
    smtpHost: str = ""
    smtpPort: str = ""
    smtpSecure: bool = False
    smtpUser: str = ""
    smtpPass: str = ""
    mailFrom: str = ""
    mailTo: str = ""

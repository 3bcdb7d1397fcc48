# somahsap/schemas/contact.py
"""
Formulieren van de publieke site, onderscheiden op het veld "type":
  quote   -> offerte-aanvraag (calculator)
  message -> contactformulier
  quick   -> alleen e-mail + toestemming
Elke variant weet zelf welke velden in de lead-payload horen.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, EmailStr, Field, StrictBool, StrictInt, TypeAdapter, ValidationError, field_validator

from somahsap.core.errors import ContentValidationError
from somahsap.schemas.content import THICKNESS_MAX_MM, THICKNESS_MIN_MM, QualityGrade, validation_details

Phone = Annotated[str, Field(min_length=7, max_length=30)]


class ContactBase(BaseModel, ABC):
    email: EmailStr
    notes: str = Field("", max_length=2000)
    company: str = ""  # honeypot: echte bezoekers zien dit veld niet
    consent: StrictBool = Field(False, validate_default=True)

    @field_validator("consent")
    @classmethod
    def _consent_given(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("consent must be true")
        return v

    @property
    def is_spam(self) -> bool:
        return bool(self.company.strip())

    @property
    def contact_phone(self) -> str:
        return ""

    @abstractmethod
    def lead_payload(self) -> Dict[str, Any]:
        """Velden die als payload bij de lead worden opgeslagen."""


class QuotePayload(ContactBase):
    type: Literal["quote"]
    phone: Phone
    usageArea: str = Field(min_length=2, max_length=60)
    woodType: str = Field(min_length=2, max_length=60)
    thicknessMm: StrictInt = Field(ge=THICKNESS_MIN_MM, le=THICKNESS_MAX_MM)
    quality: QualityGrade
    lengthMm: Optional[StrictInt] = Field(None, ge=100, le=6000)
    widthMm: Optional[StrictInt] = Field(None, ge=100, le=2000)
    quantity: Optional[StrictInt] = Field(None, ge=1, le=100)

    @property
    def contact_phone(self) -> str:
        return self.phone

    @property
    def area_m2(self) -> Optional[float]:
        """Geschatte oppervlakte (m²) als lengte én breedte bekend zijn."""
        if not self.lengthMm or not self.widthMm:
            return None
        return (self.lengthMm * self.widthMm) / 1_000_000 * (self.quantity or 1)

    def lead_payload(self) -> Dict[str, Any]:
        return {
            "usageArea": self.usageArea,
            "woodType": self.woodType,
            "quality": self.quality,
            "thicknessMm": self.thicknessMm,
            "lengthMm": self.lengthMm,
            "widthMm": self.widthMm,
            "quantity": self.quantity,
        }


class MessagePayload(ContactBase):
    type: Literal["message"]
    phone: Phone
    name: str = Field(min_length=2, max_length=60)
    subject: str = Field(min_length=2, max_length=120)
    message: str = Field(min_length=10, max_length=3000)

    @property
    def contact_phone(self) -> str:
        return self.phone

    def lead_payload(self) -> Dict[str, Any]:
        return {"name": self.name, "subject": self.subject, "message": self.message}


class QuickPayload(ContactBase):
    type: Literal["quick"]

    def lead_payload(self) -> Dict[str, Any]:
        return {"source": "quick"}


ContactPayload = Annotated[
    Union[QuotePayload, MessagePayload, QuickPayload],
    Field(discriminator="type"),
]

_contact_adapter = TypeAdapter(ContactPayload)


def parse_contact(value: Any) -> Union[QuotePayload, MessagePayload, QuickPayload]:
    try:
        return _contact_adapter.validate_python(value)
    except ValidationError as e:
        raise ContentValidationError("Form doğrulama hatası.", validation_details(e)) from e

# somahsap/schemas/content.py
"""
Schema van het bewerkbare site-document (content.json).

Elke sectie heeft harde limieten op stringlengte en lijstgrootte; een
document dat hier niet doorheen komt wordt nooit opgeslagen.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator

from somahsap.core.errors import ContentValidationError

# kwaliteitsklasse van massief houten panelen
QualityGrade = Literal["AB", "BB", "CC", "CD"]

THICKNESS_MIN_MM = 12
THICKNESS_MAX_MM = 120


class Image(BaseModel):
    src: str
    alt: str
    thumb: Optional[str] = None


class Seo(BaseModel):
    title: str = Field(max_length=120)
    description: str = Field(max_length=300)
    keywords: List[str] = Field(max_length=30)
    ogImage: Optional[str] = None
    googleSiteVerification: Optional[str] = None
    gaMeasurementId: Optional[str] = None

    @field_validator("keywords")
    @classmethod
    def _keyword_length(cls, v: List[str]) -> List[str]:
        for kw in v:
            if len(kw) > 40:
                raise ValueError("keyword longer than 40 characters")
        return v


class Brand(BaseModel):
    name: str = Field(max_length=60)
    tagline: str = Field(max_length=120)
    city: str = Field(max_length=60)
    address: Optional[str] = Field(None, max_length=200)
    phone: str = Field(max_length=30)
    email: EmailStr
    whatsapp: Optional[str] = None
    logo: Optional[str] = None
    logoHeight: Optional[int] = Field(None, gt=0)
    logoMaxWidth: Optional[int] = Field(None, gt=0)


class ThemeColors(BaseModel):
    background: str = Field(max_length=120)
    foreground: str = Field(max_length=120)
    surface: str = Field(max_length=120)
    card: str = Field(max_length=120)
    muted: str = Field(max_length=120)
    border: str = Field(max_length=120)
    accent: str = Field(max_length=120)
    accentSoft: str = Field(max_length=120)
    danger: str = Field(max_length=120)
    woodBark: str = Field(max_length=120)
    woodCore: str = Field(max_length=120)
    woodHalo: str = Field(max_length=120)


class Typography(BaseModel):
    sans: str = Field(max_length=160)
    display: str = Field(max_length=160)


class Theme(BaseModel):
    colors: ThemeColors
    typography: Typography


class Highlight(BaseModel):
    title: str
    value: str


class HeroVideo(BaseModel):
    url: str
    title: Optional[str] = Field(None, max_length=120)
    description: Optional[str] = Field(None, max_length=200)

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("heroVideo.url must be an absolute URL")
        return v


class QuickOption(BaseModel):
    label: str = Field(max_length=40)
    placeholder: Optional[str] = Field(None, max_length=80)
    options: List[str] = Field(max_length=10)
    note: Optional[str] = Field(None, max_length=120)

    @field_validator("options")
    @classmethod
    def _option_length(cls, v: List[str]) -> List[str]:
        if any(len(o) > 80 for o in v):
            raise ValueError("option longer than 80 characters")
        return v


class Hero(BaseModel):
    eyebrow: str = Field(max_length=80)
    headline: str = Field(max_length=80)
    subhead: str = Field(max_length=220)
    ctaPrimaryLabel: str = Field(max_length=30)
    ctaPrimaryHref: str
    ctaSecondaryLabel: str = Field(max_length=30)
    ctaSecondaryHref: str
    highlights: List[Highlight] = Field(max_length=8)
    note: str = Field(max_length=280)
    heroImage: Optional[Image] = None
    heroVideo: Optional[HeroVideo] = None
    quickOptions: List[QuickOption] = Field(max_length=6)


class About(BaseModel):
    heading: str = Field(max_length=80)
    text: str = Field(max_length=600)
    bullets: List[str] = Field(max_length=8)
    image: Optional[Image] = None

    @field_validator("bullets")
    @classmethod
    def _bullet_length(cls, v: List[str]) -> List[str]:
        if any(len(b) > 120 for b in v):
            raise ValueError("bullet longer than 120 characters")
        return v


class ProductCard(BaseModel):
    title: str = Field(max_length=80)
    desc: str = Field(max_length=240)
    details: Optional[str] = Field(None, max_length=800)
    image: Optional[Image] = None


class Products(BaseModel):
    heading: str = Field(max_length=80)
    intro: str = Field(max_length=400)
    cards: List[ProductCard] = Field(max_length=12)


class ServiceStep(BaseModel):
    key: str = Field(max_length=10)
    title: str = Field(max_length=60)
    desc: str = Field(max_length=200)


class Services(BaseModel):
    heading: str = Field(max_length=80)
    intro: str = Field(max_length=400)
    steps: List[ServiceStep] = Field(max_length=10)


class Calculator(BaseModel):
    usageAreas: List[str] = Field(max_length=20)
    woodTypes: List[str] = Field(max_length=30)
    thicknessOptions: List[int] = Field(min_length=1, max_length=12)
    thicknessDefaultMm: int = Field(ge=THICKNESS_MIN_MM, le=THICKNESS_MAX_MM)
    thicknessMinMm: int = Field(ge=THICKNESS_MIN_MM, le=THICKNESS_MAX_MM)
    thicknessMaxMm: int = Field(ge=THICKNESS_MIN_MM, le=THICKNESS_MAX_MM)

    @field_validator("usageAreas", "woodTypes")
    @classmethod
    def _label_length(cls, v: List[str]) -> List[str]:
        if any(len(x) > 60 for x in v):
            raise ValueError("label longer than 60 characters")
        return v

    @field_validator("thicknessOptions")
    @classmethod
    def _thickness_range(cls, v: List[int]) -> List[int]:
        for mm in v:
            if mm < THICKNESS_MIN_MM or mm > THICKNESS_MAX_MM:
                raise ValueError(
                    f"thickness must be between {THICKNESS_MIN_MM} and {THICKNESS_MAX_MM} mm"
                )
        return v


class Gallery(BaseModel):
    heading: str = Field(max_length=80)
    intro: str = Field(max_length=280)
    images: List[Image] = Field(max_length=24)


class ServiceArea(BaseModel):
    heading: str = Field(max_length=80)
    intro: str = Field(max_length=280)
    mapEmbedUrl: str
    areas: List[str] = Field(max_length=40)

    @field_validator("areas")
    @classmethod
    def _area_length(cls, v: List[str]) -> List[str]:
        if any(len(a) > 60 for a in v):
            raise ValueError("area longer than 60 characters")
        return v


class TrustItem(BaseModel):
    title: str = Field(max_length=60)
    text: str = Field(max_length=240)


class Trust(BaseModel):
    heading: str = Field(max_length=80)
    items: List[TrustItem] = Field(max_length=12)


class Testimonial(BaseModel):
    name: str = Field(max_length=60)
    title: Optional[str] = Field(None, max_length=80)
    text: str = Field(max_length=320)


class Testimonials(BaseModel):
    heading: str = Field(max_length=80)
    items: List[Testimonial] = Field(max_length=12)


class FaqItem(BaseModel):
    q: str = Field(max_length=120)
    a: str = Field(max_length=500)


class Faq(BaseModel):
    heading: str = Field(max_length=80)
    items: List[FaqItem] = Field(max_length=20)


class Footer(BaseModel):
    blurb: str = Field(max_length=220)
    fineprint: Optional[str] = Field(None, max_length=120)


class SiteContent(BaseModel):
    version: int = Field(ge=1)
    seo: Seo
    brand: Brand
    theme: Theme
    hero: Hero
    about: About
    products: Products
    services: Services
    calculator: Calculator
    gallery: Gallery
    serviceArea: ServiceArea
    trust: Trust
    testimonials: Testimonials
    faq: Faq
    footer: Footer

    def to_document(self) -> Dict[str, Any]:
        """JSON-vorm zoals hij op schijf / in S3 staat (optionele velden weggelaten)."""
        return self.model_dump(mode="json", exclude_none=True)


def validation_details(exc: ValidationError) -> List[Dict[str, Any]]:
    """Pydantic errors -> [{loc: 'hero.highlights', msg, type}] voor de API."""
    out: List[Dict[str, Any]] = []
    for err in exc.errors():
        out.append(
            {
                "loc": ".".join(str(p) for p in err.get("loc", ())),
                "msg": err.get("msg", ""),
                "type": err.get("type", ""),
            }
        )
    return out


def validate_content(value: Any) -> SiteContent:
    if isinstance(value, SiteContent):
        value = value.model_dump()
    try:
        return SiteContent.model_validate(value)
    except ValidationError as e:
        raise ContentValidationError("invalid site content", validation_details(e)) from e

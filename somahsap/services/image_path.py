# somahsap/services/image_path.py
from __future__ import annotations

import re
from typing import Optional

from somahsap.schemas.content import Image, SiteContent

# scheme gevolgd door ":" (https:, data:, mailto:, ...)
ABSOLUTE_URL_RE = re.compile(r"^[a-z][a-z0-9+.-]*:", re.IGNORECASE)


def normalize_image_src(value: Optional[str]) -> str:
    """
    Maak een door de admin ingevoerd pad canoniek:
      ""/None          -> ""
      "/uploads/a.png" -> ongewijzigd (ook "//cdn...")
      "https://..."    -> ongewijzigd
      "uploads/a.png"  -> "/uploads/a.png"
    Idempotent.
    """
    if not value:
        return ""
    trimmed = value.strip()
    if not trimmed:
        return ""
    if trimmed.startswith("/"):
        return trimmed
    if ABSOLUTE_URL_RE.match(trimmed):
        return trimmed
    return f"/{trimmed}"


def normalize_optional_image_src(value: Optional[str]) -> Optional[str]:
    return normalize_image_src(value) or None


def _normalize_image(img: Optional[Image]) -> Optional[Image]:
    if img is None:
        return None
    return img.model_copy(
        update={
            "src": normalize_image_src(img.src),
            "thumb": normalize_optional_image_src(img.thumb),
        }
    )


def normalize_content_images(content: SiteContent) -> SiteContent:
    """Past de normalizer toe op alle velden die een afbeelding bevatten."""
    c = content.model_copy(deep=True)

    c.brand.logo = normalize_optional_image_src(c.brand.logo)
    c.seo.ogImage = normalize_optional_image_src(c.seo.ogImage)
    c.hero.heroImage = _normalize_image(c.hero.heroImage)
    c.about.image = _normalize_image(c.about.image)
    for card in c.products.cards:
        card.image = _normalize_image(card.image)
    c.gallery.images = [_normalize_image(img) for img in c.gallery.images]

    return c

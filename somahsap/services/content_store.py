# somahsap/services/content_store.py
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from somahsap.core.errors import ContentValidationError, InvalidContentError
from somahsap.schemas.content import SiteContent, validate_content
from somahsap.services.image_path import normalize_content_images
from somahsap.services.storage import DocumentBackend, dump_json

logger = logging.getLogger(__name__)


class ContentStore:
    """
    Lees/schrijf het site-document via een DocumentBackend.
    - read: laden -> valideren (fout = data-integriteit, niet retryable) -> paden normaliseren
    - write: valideren (vóór elke I/O) -> paden normaliseren -> in z'n geheel opslaan
    """

    def __init__(self, backend: DocumentBackend):
        self.backend = backend

    def read_optional(self) -> Optional[SiteContent]:
        raw = self.backend.load()
        if raw is None or not raw.strip():
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidContentError(f"content is not valid JSON: {e}") from e
        try:
            content = validate_content(data)
        except ContentValidationError as e:
            logger.error(
                "persisted content failed validation backend=%s details=%s",
                self.backend.describe(),
                e.details,
            )
            raise InvalidContentError("persisted content failed validation") from e
        return normalize_content_images(content)

    def read(self) -> SiteContent:
        content = self.read_optional()
        if content is None:
            raise InvalidContentError(f"content document missing: {self.backend.describe()}")
        return content

    def write(self, doc: Any) -> SiteContent:
        validated = validate_content(doc)  # raises ContentValidationError, geen I/O
        normalized = normalize_content_images(validated)
        self.backend.save(dump_json(normalized.to_document()))
        logger.info("content written backend=%s version=%s", self.backend.describe(), normalized.version)
        return normalized

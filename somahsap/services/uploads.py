# somahsap/services/uploads.py
from __future__ import annotations

import io
import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class UploadRejected(ValueError):
    pass


@dataclass(frozen=True)
class StoredImage:
    src: str
    thumb: Optional[str]


def safe_filename(name: str) -> str:
    """Maak bestandsnaam URL/FS-safe (lowercase, max 80 tekens)."""
    name = PurePath(name or "image").name.lower()
    return re.sub(r"[^a-z0-9._-]+", "-", name)[:80] or "image"


class ImageUploads:
    def __init__(
        self,
        upload_dir: Path,
        url_prefix: str = "/uploads",
        max_bytes: int = 5 * 1024 * 1024,
        thumb_width: int = 800,
        thumb_quality: int = 75,
    ):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes
        self.thumb_width = thumb_width
        self.thumb_quality = thumb_quality

    def _make_thumb(self, data: bytes, target: Path) -> None:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img = img.convert("RGB")
                if img.width > self.thumb_width:
                    height = max(1, round(img.height * self.thumb_width / img.width))
                    img = img.resize((self.thumb_width, height), resample=Image.LANCZOS)
                img.save(target, format="JPEG", quality=self.thumb_quality)
        except (UnidentifiedImageError, OSError) as e:
            raise UploadRejected("Görsel okunamadı.") from e

    def save(self, filename: str, content_type: Optional[str], data: bytes) -> StoredImage:
        ctype = (content_type or "").lower()
        if not ctype.startswith("image/"):
            raise UploadRejected("Sadece görsel yüklenebilir.")
        if not data:
            raise UploadRejected("Dosya bulunamadı.")
        if len(data) > self.max_bytes:
            raise UploadRejected(f"Dosya çok büyük (max {self.max_bytes // (1024 * 1024)}MB).")

        safe = safe_filename(filename)
        stem, ext = PurePath(safe).stem, PurePath(safe).suffix or ".png"
        ts = int(time.time() * 1000)
        stored_name = f"{ts}-{stem}{ext}"

        self.upload_dir.mkdir(parents=True, exist_ok=True)

        if "svg" in ctype:
            thumb_name = stored_name  # SVG: origineel is ook de thumb
        else:
            thumb_name = f"{stem}-{ts}-thumb.jpg"
            self._make_thumb(data, self.upload_dir / thumb_name)

        (self.upload_dir / stored_name).write_bytes(data)
        logger.info("image uploaded name=%s size=%s thumb=%s", stored_name, len(data), thumb_name)

        return StoredImage(
            src=f"{self.url_prefix}/{stored_name}",
            thumb=f"{self.url_prefix}/{thumb_name}",
        )

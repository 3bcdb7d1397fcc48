# somahsap/services/storage.py
"""
Backing stores voor de JSON-documenten (content, leads, mailbox).

Een document wordt altijd in zijn geheel gelezen en geschreven:
  - lokaal: schrijf naar een vers tijdelijk bestand in dezelfde map en
    hernoem het daarna atomair over het echte pad (os.replace), zodat een
    lezer nooit een half geschreven bestand ziet;
  - S3: een enkele PutObject is alles-of-niets, dus geen temp-stap nodig.
Er is geen locking: bij twee gelijktijdige schrijvers wint de laatste.
"""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from somahsap.aws.s3_errors import describe_client_error, is_not_found
from somahsap.core.errors import ConfigurationError, StorageError

logger = logging.getLogger(__name__)


# =========================
# Atomic replace
# =========================
def atomic_write_text(path: Path, text: str) -> None:
    """Scoped write naar een temp-pad, daarna atomic rename over het canonieke pad."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f"{path.stem}.", suffix=".tmp.json", dir=str(path.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        # tijdelijk bestand opruimen; het canonieke pad is niet aangeraakt
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def dump_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


# =========================
# Abstracte backend
# =========================
class DocumentBackend(ABC):
    """Laad/sla één tekstdocument op; None betekent: bestaat nog niet."""

    @abstractmethod
    def load(self) -> Optional[str]:
        pass

    @abstractmethod
    def save(self, text: str) -> None:
        pass

    def describe(self) -> str:
        return self.__class__.__name__


# =========================
# Local file
# =========================
class LocalFileBackend(DocumentBackend):
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"read failed: {self.path}: {e}") from e

    def save(self, text: str) -> None:
        try:
            atomic_write_text(self.path, text)
        except OSError as e:
            raise StorageError(f"write failed: {self.path}: {e}") from e
        logger.debug("document written path=%s bytes=%s", self.path, len(text))

    def describe(self) -> str:
        return f"file://{self.path}"


# =========================
# S3 object
# =========================
class S3ObjectBackend(DocumentBackend):
    def __init__(self, client, bucket: str, key: str):
        self.client = client
        self.bucket = bucket
        self.key = key

    def load(self) -> Optional[str]:
        try:
            r = self.client.get_object(Bucket=self.bucket, Key=self.key)
            return r["Body"].read().decode("utf-8")
        except ClientError as e:
            if is_not_found(e):
                return None
            code, ctx = describe_client_error(e)
            logger.error("S3 get_object failed key=%s ctx=%s", self.key, ctx)
            raise StorageError(f"s3_get_failed:{code}") from e
        except BotoCoreError as e:
            raise StorageError(f"s3_get_failed:{type(e).__name__}") from e

    def save(self, text: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=self.key,
                Body=text.encode("utf-8"),
                ContentType="application/json",
            )
        except ClientError as e:
            code, ctx = describe_client_error(e)
            logger.error("S3 put_object failed key=%s ctx=%s", self.key, ctx)
            raise StorageError(f"s3_put_failed:{code}") from e
        except BotoCoreError as e:
            raise StorageError(f"s3_put_failed:{type(e).__name__}") from e
        logger.info("S3 document written s3://%s/%s", self.bucket, self.key)

    def describe(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


# =========================
# Factory
# =========================
def build_content_backend(settings, secrets, s3_client=None) -> DocumentBackend:
    """
    Kies de backend voor content.json op basis van settings.
    Voor S3 komen bucket/key uit settings, anders uit de secrets provider
    (parameter store).
    """
    if settings.CONTENT_BACKEND == "local":
        return LocalFileBackend(settings.content_path)

    if settings.CONTENT_BACKEND == "s3":
        bucket = settings.ADMIN_CONTENT_BUCKET or secrets.get("ADMIN_CONTENT_BUCKET")
        key = settings.ADMIN_CONTENT_KEY or secrets.get("ADMIN_CONTENT_KEY")
        missing = [
            name
            for name, value in (("ADMIN_CONTENT_BUCKET", bucket), ("ADMIN_CONTENT_KEY", key))
            if not value
        ]
        if missing:
            raise ConfigurationError(missing)
        if s3_client is None:
            from somahsap.infra.aws_clients import make_client  # lazy import

            s3_client = make_client("s3", settings.AWS_REGION)
        return S3ObjectBackend(s3_client, bucket, key)

    raise ValueError(f"Onbekende content backend: {settings.CONTENT_BACKEND}")

# somahsap/infra/secrets.py
"""
Eén SecretsProvider per deployment target, gekozen bij startup.

    env             -> proces-env + optioneel geïnjecteerd "secrets" JSON-object
    ssm             -> SSM Parameter Store onder een prefix (WithDecryption)
    secretsmanager  -> één Secrets Manager secret met een JSON-object

Caching gebeurt expliciet via CachedSecretsProvider (TTL), nooit via globals.
"""
from __future__ import annotations

import json
import logging
import os
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from somahsap.aws.s3_errors import describe_client_error, is_not_found

logger = logging.getLogger(__name__)

ADMIN_PASSWORD = "ADMIN_PASSWORD"
ADMIN_SECRET = "ADMIN_SECRET"


def _clean(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class SecretsProvider(ABC):
    @abstractmethod
    def get_many(self, names: Iterable[str]) -> Dict[str, Optional[str]]:
        pass

    def get(self, name: str) -> Optional[str]:
        return self.get_many([name]).get(name)


# =========================
# Env (+ geïnjecteerd secrets-object)
# =========================
class EnvSecretsProvider(SecretsProvider):
    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def _secrets_object(self) -> Dict[str, object]:
        raw = self.environ.get("secrets")
        if not raw:
            return {}
        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("injected secrets object is not valid JSON; ignored")
            return {}
        return parsed if isinstance(parsed, dict) else {}

    def get_many(self, names: Iterable[str]) -> Dict[str, Optional[str]]:
        bundle = self._secrets_object()
        out: Dict[str, Optional[str]] = {}
        for name in names:
            out[name] = _clean(self.environ.get(name)) or _clean(bundle.get(name))
        return out


# =========================
# SSM Parameter Store
# =========================
class SsmSecretsProvider(SecretsProvider):
    def __init__(self, client, prefix: str = ""):
        self.client = client
        self.prefix = prefix

    def _param_name(self, name: str) -> str:
        if not self.prefix:
            return name
        return f"{self.prefix.rstrip('/')}/{name}"

    def get_many(self, names: Iterable[str]) -> Dict[str, Optional[str]]:
        names = list(names)
        by_param = {self._param_name(n): n for n in names}
        out: Dict[str, Optional[str]] = {n: None for n in names}
        try:
            r = self.client.get_parameters(Names=list(by_param), WithDecryption=True)
        except ClientError as e:
            code, ctx = describe_client_error(e)
            logger.error("SSM get_parameters failed code=%s ctx=%s", code, ctx)
            return out
        except BotoCoreError as e:
            logger.error("SSM get_parameters failed: %s", type(e).__name__)
            return out

        for p in r.get("Parameters", []) or []:
            name = by_param.get(p.get("Name", ""))
            if name:
                out[name] = _clean(p.get("Value"))
        invalid = r.get("InvalidParameters") or []
        if invalid:
            logger.warning("SSM parameters not found: %s", invalid)
        return out


# =========================
# Secrets Manager
# =========================
class SecretsManagerProvider(SecretsProvider):
    def __init__(self, client, secret_id: str):
        self.client = client
        self.secret_id = secret_id

    def _fetch(self) -> Dict[str, object]:
        try:
            r = self.client.get_secret_value(SecretId=self.secret_id)
        except ClientError as e:
            if not is_not_found(e):
                code, ctx = describe_client_error(e)
                logger.error("SecretsManager fetch failed code=%s ctx=%s", code, ctx)
            return {}
        except BotoCoreError as e:
            logger.error("SecretsManager fetch failed: %s", type(e).__name__)
            return {}

        secret_string = r.get("SecretString")
        if not secret_string and r.get("SecretBinary"):
            secret_string = bytes(r["SecretBinary"]).decode("utf-8")
        if not secret_string:
            return {}
        try:
            parsed = json.loads(secret_string)
        except ValueError:
            logger.error("SecretsManager secret %s is not a JSON object", self.secret_id)
            return {}
        return parsed if isinstance(parsed, dict) else {}

    def get_many(self, names: Iterable[str]) -> Dict[str, Optional[str]]:
        bundle = self._fetch()
        return {n: _clean(bundle.get(n)) for n in names}


# =========================
# TTL cache wrapper
# =========================
class CachedSecretsProvider(SecretsProvider):
    def __init__(
        self,
        inner: SecretsProvider,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.inner = inner
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._cache: Dict[str, Tuple[float, Optional[str]]] = {}
        self._lock = threading.Lock()

    def get_many(self, names: Iterable[str]) -> Dict[str, Optional[str]]:
        names = list(names)
        now = self.clock()
        out: Dict[str, Optional[str]] = {}
        stale = []
        with self._lock:
            for n in names:
                hit = self._cache.get(n)
                if hit and now - hit[0] < self.ttl_seconds:
                    out[n] = hit[1]
                else:
                    stale.append(n)
        if stale:
            fresh = self.inner.get_many(stale)
            with self._lock:
                for n in stale:
                    self._cache[n] = (now, fresh.get(n))
                    out[n] = fresh.get(n)
        return out

    def invalidate(self) -> None:
        with self._lock:
            self._cache.clear()


# =========================
# Factory
# =========================
def build_secrets_provider(settings, client=None) -> SecretsProvider:
    backend = settings.SECRETS_BACKEND
    if backend == "env":
        inner: SecretsProvider = EnvSecretsProvider()
    elif backend == "ssm":
        if client is None:
            from somahsap.infra.aws_clients import make_client  # lazy import

            client = make_client("ssm", settings.AWS_REGION)
        inner = SsmSecretsProvider(client, prefix=settings.SECRETS_SSM_PREFIX)
    elif backend == "secretsmanager":
        if client is None:
            from somahsap.infra.aws_clients import make_client  # lazy import

            client = make_client("secretsmanager", settings.AWS_REGION)
        inner = SecretsManagerProvider(client, secret_id=settings.SECRETS_MANAGER_ID)
    else:
        raise ValueError(f"Onbekende secrets backend: {backend}")

    logger.info("secrets provider selected backend=%s ttl=%ss", backend, settings.SECRETS_CACHE_TTL_SECONDS)
    return CachedSecretsProvider(inner, ttl_seconds=settings.SECRETS_CACHE_TTL_SECONDS)

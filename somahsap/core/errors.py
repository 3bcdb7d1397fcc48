# somahsap/core/errors.py
from __future__ import annotations

from typing import Any, Dict, List, Optional


class ContentValidationError(ValueError):
    """Input voldoet niet aan het schema; wordt nooit opgeslagen (HTTP 400)."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.details = details or []


class InvalidContentError(RuntimeError):
    """Opgeslagen document is corrupt of voldoet niet meer aan het schema."""


class StorageError(RuntimeError):
    """Lezen/schrijven naar de backing store is mislukt."""


class MailError(RuntimeError):
    """Notificatie kon niet verstuurd worden (config, netwerk of timeout)."""


class ConfigurationError(RuntimeError):
    """Verplichte secret/setting ontbreekt."""

    def __init__(self, missing: List[str]):
        super().__init__(f"Missing configuration: {', '.join(missing)}")
        self.missing = missing

# somahsap/routers/common.py
import json
from typing import Any

from fastapi import Request

from somahsap.core.errors import ContentValidationError

NO_STORE = {"cache-control": "no-store"}


async def read_json_body(request: Request) -> Any:
    """Ruwe JSON body; kapotte JSON telt als validatiefout (400), niet als 422/500."""
    raw = await request.body()
    try:
        return json.loads(raw or b"null")
    except (ValueError, UnicodeDecodeError) as e:
        raise ContentValidationError(
            "invalid JSON body", [{"loc": "body", "msg": str(e), "type": "json_invalid"}]
        ) from e

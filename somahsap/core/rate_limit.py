# somahsap/core/rate_limit.py
from slowapi import Limiter
from slowapi.util import get_remote_address


def build_limiter(settings) -> Limiter:
    # 1 Limiter per app (alleen publieke formulieren zijn gelimiteerd)
    return Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

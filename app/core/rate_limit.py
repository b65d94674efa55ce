from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def rate_limit(limit: str | None = None):
    """Per-client limit for the analysis routes; a no-op when rate limiting is off."""
    if not settings.rate_limit_enabled:
        def decorator(func):
            return func

        return decorator
    return limiter.limit(limit or settings.rate_limit)


def reset_rate_limits() -> None:
    limiter.reset()

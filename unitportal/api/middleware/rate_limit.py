"""
API Gateway Rate Limiting - per IP for sign-in, per member (or IP) otherwise.

Access codes are short shared secrets, so sign-in attempts are limited per
client IP to slow down guessing.
"""

import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request, Response, status
from jose import JWTError, jwt
from starlette.middleware.base import BaseHTTPMiddleware

from unitportal.config import get_settings
from unitportal.logging_config import get_logger

logger = get_logger(__name__)

WINDOW_SECONDS = 60


def _get_client_ip(request: Request) -> str:
    """Get client IP from request (X-Forwarded-For or direct)."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _get_member_id_from_jwt(request: Request) -> Optional[str]:
    """Personnel id from a Bearer token, if it verifies. Authorization runs later."""
    auth = request.headers.get("authorization")
    if not auth or not auth.lower().startswith("bearer "):
        return None
    token = auth[7:].strip()
    if not token:
        return None
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    return payload.get("sub")


class InMemoryRateLimitStore:
    """Fixed-window in-memory store. Key -> (count, window_start_ts)."""

    def __init__(self):
        self._data: Dict[str, Tuple[int, float]] = {}

    def check_and_incr(
        self,
        scope: str,
        identifier: str,
        limit: int,
        window_seconds: int = WINDOW_SECONDS,
    ) -> bool:
        """Returns True if under limit (and increments). False if over limit (no increment)."""
        key = f"{scope}:{identifier}"
        now = time.monotonic()
        count, start = self._data.get(key, (0, now))
        if now - start >= window_seconds:
            count, start = 0, now
        if count >= limit:
            return False
        self._data[key] = (count + 1, start)
        return True

    def cleanup_old(self, max_age_seconds: int = 3600) -> None:
        """Remove entries older than max_age_seconds to avoid unbounded growth."""
        now = time.monotonic()
        stale = [k for k, (_, start) in self._data.items() if now - start > max_age_seconds]
        for k in stale:
            self._data.pop(k, None)

    def reset(self) -> None:
        self._data.clear()


# Module-level store (single process)
_store: Optional[InMemoryRateLimitStore] = None


def get_store() -> InMemoryRateLimitStore:
    global _store
    if _store is None:
        _store = InMemoryRateLimitStore()
    return _store


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rate limit by scope:
    - login: POST {prefix}/auth/login -> per IP
    - api: other {prefix} routes -> per member (or IP)
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        settings = get_settings()
        if not settings.rate_limit_enabled:
            return await call_next(request)

        path = request.url.path or ""
        if not path.startswith(settings.api_v1_prefix):
            return await call_next(request)

        store = get_store()
        store.cleanup_old(max_age_seconds=7200)

        if path == f"{settings.api_v1_prefix}/auth/login" and request.method == "POST":
            scope = "login"
            limit = settings.rate_limit_login_per_minute
            identifier = _get_client_ip(request)
        else:
            scope = "api"
            limit = settings.rate_limit_api_per_minute
            identifier = _get_member_id_from_jwt(request) or _get_client_ip(request)

        if not store.check_and_incr(scope, identifier, limit):
            logger.warning("Rate limit exceeded", extra={"scope": scope, "path": path})
            return Response(
                content='{"detail":{"code":"rate_limited","message":"Too many requests. Please try again later."}}',
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                media_type="application/json",
            )
        return await call_next(request)

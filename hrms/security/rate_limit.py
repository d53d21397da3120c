from __future__ import annotations

import logging
import threading
import time

from cachetools import TTLCache
from fastapi import Request, status

from hrms.errors import ApiError

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """
    In-memory fixed-window counters keyed by `<bucket>:<client ip>`.

    Counters live in a TTLCache sized to the window, so an idle key simply
    expires. State is per process.
    """

    def __init__(self, window_seconds: int, max_items: int = 50_000) -> None:
        self._window = max(1, window_seconds)
        self._counts: TTLCache = TTLCache(maxsize=max_items, ttl=self._window)
        self._lock = threading.RLock()

    def _window_id(self) -> int:
        return int(time.time() // self._window)

    def hit(self, key: str, limit: int) -> bool:
        """Count one request; False once `limit` is exceeded in this window."""
        cache_key = f"{key}:{self._window_id()}"
        with self._lock:
            count = self._counts.get(cache_key, 0) + 1
            self._counts[cache_key] = count
        return count <= limit

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()


def client_ip(request: Request) -> str:
    """
    The peer address only. `X-Forwarded-For` is client-controlled; behind a
    proxy run uvicorn with `--proxy-headers --forwarded-allow-ips` so the peer
    is rewritten for trusted proxies only.
    """
    return request.client.host if request.client else "unknown"


def rate_limit(bucket: str):
    """
    Dependency factory: enforce the limit configured for `bucket`
    (`general` or `auth`) against the caller's IP.
    """

    def dependency(request: Request) -> None:
        limiter: FixedWindowRateLimiter | None = getattr(request.app.state, "rate_limiter", None)
        limits: dict[str, int] = getattr(request.app.state, "rate_limits", {})
        limit = limits.get(bucket)
        if limiter is None or not limit:
            return

        ip = client_ip(request)
        if not limiter.hit(f"{bucket}:{ip}", limit):
            logger.warning("Rate limit exceeded bucket=%s ip=%s path=%s", bucket, ip, request.url.path)
            raise ApiError(
                status.HTTP_429_TOO_MANY_REQUESTS,
                message="Too many requests, please try again later.",
            )

    return dependency

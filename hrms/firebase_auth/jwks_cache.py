"""
JWKS fetch and cache with TTL. No per-request fetches.

Background:
    Firebase signs every ID token with one of Google's rotating RSA keys and
    publishes the public halves as a JWKS document. This module fetches that
    document and caches it so we don't call Google on every request.

    Google advertises how long the document stays valid through the
    ``Cache-Control: max-age=N`` response header; when present it wins over
    the configured TTL. A token whose ``kid`` we have not seen triggers one
    forced refresh (keys were probably rotated) before the key is reported
    missing.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from typing import Any

import requests
from jwt import PyJWK

logger = logging.getLogger(__name__)

_MAX_AGE_RE = re.compile(r"max-age=(\d+)")


def parse_max_age(cache_control: str | None) -> int | None:
    if not cache_control:
        return None
    match = _MAX_AGE_RE.search(cache_control)
    return int(match.group(1)) if match else None


class JWKSCache:
    """
    In-memory cache of Google's securetoken JWKS.
    """

    def __init__(self, jwks_uri: str, ttl_seconds: int, min_refresh_interval: float = 30.0) -> None:
        self._uri = jwks_uri
        self._default_ttl = ttl_seconds
        self._ttl = ttl_seconds
        self._min_refresh_interval = min_refresh_interval
        self._keys: dict[str, PyJWK] = {}
        self._fetched_at: float | None = None
        self._lock = threading.Lock()

    def _fetch(self) -> tuple[dict[str, Any], int | None]:
        resp = requests.get(self._uri, timeout=10)
        resp.raise_for_status()
        return resp.json(), parse_max_age(resp.headers.get("Cache-Control"))

    def _refresh(self) -> None:
        data, max_age = self._fetch()
        keys: dict[str, PyJWK] = {}
        for key_dict in data.get("keys") or []:
            kid = key_dict.get("kid")
            if kid:
                keys[kid] = PyJWK.from_dict(key_dict)
        self._keys = keys
        self._ttl = max_age if max_age is not None else self._default_ttl
        self._fetched_at = time.monotonic()
        logger.debug("JWKS cache refreshed uri=%s keys=%d ttl=%ss", self._uri, len(keys), self._ttl)

    def _is_stale(self) -> bool:
        if self._fetched_at is None:
            return True
        return (time.monotonic() - self._fetched_at) >= self._ttl

    def get_signing_key(self, kid: str) -> PyJWK | None:
        """
        Return the JWK for the given key id, refreshing once on a miss.

        A miss forces a refetch at most once per `min_refresh_interval`
        seconds, so tokens with made-up key ids cannot hammer Google.
        """
        with self._lock:
            if self._is_stale():
                self._refresh()
            key = self._keys.get(kid)
            if key is not None or not self._can_force_refresh():
                return key

            logger.info("kid not in cached JWKS; refreshing for possible key rotation")
            self._refresh()
            return self._keys.get(kid)

    def _can_force_refresh(self) -> bool:
        if self._fetched_at is None:
            return True
        return (time.monotonic() - self._fetched_at) >= self._min_refresh_interval

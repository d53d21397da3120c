from __future__ import annotations

import logging
import threading

from cachetools import TTLCache

from hrms.db.gateway import ProcedureGateway

logger = logging.getLogger(__name__)


class RoleResolver:
    """
    Resolves a user's role with one `sp_get_user_role` call.

    With `ttl_seconds=0` (the default) nothing is cached and every protected
    request pays the round trip; a positive TTL keeps answers per identifier.
    """

    def __init__(self, ttl_seconds: int = 0, max_items: int = 10_000) -> None:
        self._cache: TTLCache | None = TTLCache(maxsize=max_items, ttl=ttl_seconds) if ttl_seconds > 0 else None
        self._lock = threading.RLock()

    def resolve(self, gateway: ProcedureGateway, identifier: str) -> str | None:
        if self._cache is not None:
            with self._lock:
                if identifier in self._cache:
                    return self._cache[identifier]

        row = gateway.call("sp_get_user_role", [identifier]).first()
        role = row.get("role") if row else None
        logger.debug("Resolved role identifier_present=%s role=%s", bool(identifier), role)

        if self._cache is not None:
            with self._lock:
                self._cache[identifier] = role
        return role

    def invalidate(self, identifier: str) -> None:
        if self._cache is not None:
            with self._lock:
                self._cache.pop(identifier, None)

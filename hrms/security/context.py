from __future__ import annotations

from dataclasses import dataclass

ROLES = frozenset({"employee", "admin", "hr"})
ADMIN_ROLES = frozenset({"admin"})
ADMIN_OR_HR_ROLES = frozenset({"admin", "hr"})


@dataclass(frozen=True)
class AuthzContext:
    """
    Per-request authorization outcome, attached to `request.state.authz`.
    """

    uid: str
    role: str | None
    allowed_roles: frozenset[str]

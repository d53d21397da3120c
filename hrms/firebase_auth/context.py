"""Serializable identity produced after validating a Firebase ID token."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IdentityContext:
    """
    What the auth gate attaches to a request.

    Role is deliberately absent: it is resolved from the database per request.
    """

    uid: str
    """Firebase user id (`sub` / `user_id` claim)."""

    email: str | None = None

    name: str | None = None
    """Display name; for UI only."""

    picture: str | None = None

    @property
    def identifier(self) -> str | None:
        """Key used for the role lookup: uid, falling back to email."""
        return self.uid or self.email

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "uid": self.uid,
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
        }

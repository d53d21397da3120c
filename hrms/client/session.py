from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any


@dataclass
class SessionUser:
    """The caller as the server sees it (from `/auth/me`)."""

    uid: str
    email: str | None = None
    name: str | None = None
    picture: str | None = None
    role: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionUser:
        return cls(
            uid=data["uid"],
            email=data.get("email"),
            name=data.get("name"),
            picture=data.get("picture"),
            role=data.get("role"),
        )


@dataclass
class SessionStore:
    """
    Explicit client-side session: the bearer token plus the server-resolved user.

    One store is handed to each `HrmsClient`; nothing is kept in module globals.
    The role only ever comes from the server, never from the token.
    """

    token: str | None = None
    user: SessionUser | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def sign_in(self, token: str) -> None:
        with self._lock:
            self.token = token
            self.user = None

    def set_user(self, user: SessionUser | None) -> None:
        with self._lock:
            self.user = user

    def sign_out(self) -> None:
        with self._lock:
            self.token = None
            self.user = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def role(self) -> str | None:
        return self.user.role if self.user else None

    def authorization_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

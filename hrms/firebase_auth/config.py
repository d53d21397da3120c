"""Configuration from environment variables. No hardcoded secrets."""

from __future__ import annotations

import os
from dataclasses import dataclass

GOOGLE_SECURETOKEN_JWKS_URI = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)


def _getenv(key: str, default: str | None = None) -> str | None:
    return os.environ.get(key, default)


def _getenv_int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class FirebaseConfig:
    """
    Firebase Authentication (ID token) configuration from environment.

    Required (for validation):
        FIREBASE_PROJECT_ID: Firebase / GCP project id; used as audience and
            to build the expected issuer.

    Optional:
        FIREBASE_JWKS_URI: Override for Google's securetoken JWKS endpoint.
        CLOCK_SKEW_SECONDS: Seconds of tolerance for exp/nbf/iat (default 120).
        JWKS_CACHE_TTL_SECONDS: How long to cache JWKS (default 3600).
    """

    project_id: str
    jwks_uri: str
    clock_skew_seconds: int
    jwks_cache_ttl_seconds: int

    @property
    def expected_audience(self) -> str:
        return self.project_id

    @property
    def issuer(self) -> str:
        return f"https://securetoken.google.com/{self.project_id}"

    @classmethod
    def from_environ(cls) -> FirebaseConfig:
        project = _getenv("FIREBASE_PROJECT_ID")
        if not project or not project.strip():
            raise _config_error("FIREBASE_PROJECT_ID must be set")
        return cls(
            project_id=project.strip(),
            jwks_uri=_strip_or_none(_getenv("FIREBASE_JWKS_URI")) or GOOGLE_SECURETOKEN_JWKS_URI,
            clock_skew_seconds=_getenv_int("CLOCK_SKEW_SECONDS", 120),
            jwks_cache_ttl_seconds=_getenv_int("JWKS_CACHE_TTL_SECONDS", 3600),
        )


def _strip_or_none(s: str | None) -> str | None:
    if s is None:
        return None
    t = s.strip()
    return t if t else None


def _config_error(msg: str) -> Exception:
    return ValueError(msg)

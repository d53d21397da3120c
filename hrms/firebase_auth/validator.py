"""
Validate Firebase ID tokens (RS256 JWTs) and extract the caller's identity.

Before trusting anything in the token we check:

1. the **signature**, against Google's published securetoken keys;
2. the **issuer** (``iss``) is ``https://securetoken.google.com/<project>``;
3. the **audience** (``aud``) is our Firebase project id;
4. ``exp`` / ``iat`` (and ``nbf`` when present) with clock-skew leeway;
5. a non-empty **subject** (``sub``), which Firebase sets to the user's uid.

Only then is an ``IdentityContext`` built for the rest of the app.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import jwt

from .config import FirebaseConfig
from .context import IdentityContext
from .jwks_cache import JWKSCache

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when token validation fails. Do not log the token."""

    pass


class TokenVerifier(Protocol):
    def verify(self, token: str) -> IdentityContext: ...


def _get_kid(token: str) -> str | None:
    try:
        header = jwt.get_unverified_header(token)
        return header.get("kid") if isinstance(header, dict) else None
    except jwt.InvalidTokenError:
        return None


def _extract_identity(payload: dict[str, Any]) -> IdentityContext:
    """
    Build an ``IdentityContext`` from a validated payload.

    Firebase puts the uid in both ``sub`` and ``user_id``; ``email``,
    ``name`` and ``picture`` are present when the sign-in provider supplies
    them.
    """

    uid = payload.get("sub") or payload.get("user_id") or ""
    if not isinstance(uid, str) or not uid.strip():
        raise ValidationError("Invalid token: missing subject")

    def _opt(key: str) -> str | None:
        value = payload.get(key)
        return str(value) if value else None

    return IdentityContext(
        uid=uid.strip(),
        email=_opt("email"),
        name=_opt("name"),
        picture=_opt("picture"),
    )


class FirebaseTokenValidator:
    """
    Verifies Firebase ID tokens using Google's JWKS with a TTL cache.
    """

    def __init__(self, config: FirebaseConfig | None = None) -> None:
        self._config = config or FirebaseConfig.from_environ()
        self._jwks = JWKSCache(
            self._config.jwks_uri,
            self._config.jwks_cache_ttl_seconds,
        )

    def verify(self, token: str) -> IdentityContext:
        """
        Validate the ID token and return the caller's identity.

        Raises ValidationError if the key id, signature, issuer, audience,
        lifetime or subject checks fail.
        """
        kid = _get_kid(token)
        if not kid:
            logger.debug("Token missing or invalid kid")
            raise ValidationError("Invalid token: missing key id")

        try:
            signing_key = self._jwks.get_signing_key(kid)
        except Exception as e:
            logger.warning("JWKS fetch failed: %s", type(e).__name__)
            raise ValidationError("Invalid token: signing keys unavailable") from e
        if signing_key is None:
            logger.debug("No signing key found for kid")
            raise ValidationError("Invalid token: unknown signing key")

        try:
            payload = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self._config.expected_audience,
                issuer=self._config.issuer,
                leeway=self._config.clock_skew_seconds,
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Token expired")
            raise ValidationError("Token expired") from e
        except jwt.InvalidIssuerError as e:
            logger.info("Token invalid issuer")
            raise ValidationError("Invalid token: issuer") from e
        except jwt.InvalidAudienceError as e:
            logger.info("Token invalid audience")
            raise ValidationError("Invalid token: audience") from e
        except jwt.InvalidTokenError as e:
            logger.info("Token invalid: %s", type(e).__name__)
            raise ValidationError("Invalid token") from e

        return _extract_identity(payload)


def verify_id_token(token: str, config: FirebaseConfig | None = None) -> IdentityContext:
    """
    Convenience one-shot: build a validator (config from the environment when
    ``config`` is None) and verify ``token``. Reuse a ``FirebaseTokenValidator``
    instead when verifying many tokens, so its JWKS cache is shared.
    """
    return FirebaseTokenValidator(config=config).verify(token)

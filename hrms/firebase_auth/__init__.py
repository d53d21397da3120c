"""
Standalone utility to verify Firebase ID tokens and extract the caller's identity.

This package has no dependency on other hrms packages (db, security, routers).
Use verify_id_token() with a bearer token string to get an IdentityContext.
"""

from .config import FirebaseConfig
from .context import IdentityContext
from .validator import FirebaseTokenValidator, TokenVerifier, ValidationError, verify_id_token

__all__ = [
    "FirebaseConfig",
    "IdentityContext",
    "FirebaseTokenValidator",
    "TokenVerifier",
    "ValidationError",
    "verify_id_token",
]

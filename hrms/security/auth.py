from __future__ import annotations

import logging

from fastapi import Request, status

from hrms.errors import ApiError
from hrms.firebase_auth import IdentityContext, TokenVerifier, ValidationError
from hrms.security.config import SecurityConfig

logger = logging.getLogger(__name__)


def _unauthorized(message: str) -> ApiError:
    return ApiError(
        status.HTTP_401_UNAUTHORIZED,
        error=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def extract_bearer_token(request: Request, config: SecurityConfig) -> str | None:
    """
    Read `Authorization: Bearer <token>`.

    Returns None when the header is absent; a present-but-malformed header
    is rejected outright.
    """

    header_name = config.auth.authorization_header
    bearer_prefix = config.auth.bearer_prefix

    raw = request.headers.get(header_name)
    if not raw:
        logger.info("Missing Authorization header (auth required) path=%s method=%s", request.url.path, request.method)
        return None

    prefix = f"{bearer_prefix} "
    if not raw.startswith(prefix):
        logger.warning("Invalid Authorization header format path=%s method=%s", request.url.path, request.method)
        raise _unauthorized("Invalid or expired token")

    token = raw[len(prefix) :].strip()
    if not token:
        logger.warning("Empty bearer token path=%s method=%s", request.url.path, request.method)
        raise _unauthorized("Invalid or expired token")

    return token


def authenticate_request(request: Request, config: SecurityConfig, verifier: TokenVerifier) -> IdentityContext:
    """
    Verify the caller's bearer token and attach the identity to `request.state.user`.
    """

    existing = getattr(request.state, "user", None)
    if existing is not None:
        return existing

    token = extract_bearer_token(request, config)
    if token is None:
        raise _unauthorized("You are not authorized to access this resource!")

    try:
        user = verifier.verify(token)
    except ValidationError as exc:
        logger.info("Token rejected path=%s reason=%s", request.url.path, exc)
        raise _unauthorized("Invalid or expired token") from exc

    request.state.user = user
    return user

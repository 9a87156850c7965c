"""Resolving the Authorization header into an AuthContext."""

from __future__ import annotations

from uuid import UUID

from fastapi import Header

from ..logging import get_logger
from .adapters.base import AuthenticationError
from .context import AuthContext
from .factory import get_auth_adapter

logger = get_logger(__name__)


def extract_bearer_token(authorization: str) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer":
        raise AuthenticationError("Invalid authorization format. Expected: Bearer <token>")

    token = token.strip()
    if not token:
        raise AuthenticationError("Empty token")

    return token


async def resolve_auth_context(authorization: str | None) -> AuthContext:
    """
    Turn an Authorization header value into an AuthContext.

    A missing header yields an unauthenticated context.

    Raises:
        AuthenticationError: If the header is malformed or the token is invalid
    """
    if not authorization:
        return AuthContext.anonymous()

    token = extract_bearer_token(authorization)
    principal = await get_auth_adapter().verify_token(token)

    try:
        user_id = UUID(principal["subject"])
    except ValueError as e:
        raise AuthenticationError("Invalid subject in token") from e

    return AuthContext(user_id=user_id, principal=principal, token=token)


async def get_auth_context_optional(authorization: str | None = Header(None)) -> AuthContext:
    """
    Resolve the caller, treating a malformed or invalid token as anonymous.

    Operations that need a user then fail with "Authentication required".
    """
    try:
        return await resolve_auth_context(authorization)
    except AuthenticationError as e:
        logger.info("Ignoring invalid credentials", error=str(e))
        return AuthContext.anonymous()

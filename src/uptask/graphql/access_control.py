"""
Shared access control logic for GraphQL resolvers
"""

from typing import Protocol
from uuid import UUID

import strawberry

from ..auth.adapters.base import AuthenticationError, AuthorizationError
from ..auth.context import AuthContext
from ..auth.middleware import get_auth_context_optional
from ..logging import get_logger

logger = get_logger(__name__)


class Owned(Protocol):
    id: UUID
    owner_id: UUID


async def get_auth_context_from_info(info: strawberry.Info) -> AuthContext | None:
    """
    Extract auth context from GraphQL info object.

    Uses the context resolved once per request when present, otherwise
    resolves it from the request headers. Returns None if no request is available.
    """
    auth = info.context.get("auth")
    if auth is not None:
        return auth

    request = info.context.get("request")
    if not request:
        logger.error("Request not found in GraphQL context")
        return None

    auth = await get_auth_context_optional(authorization=request.headers.get("authorization"))
    info.context["auth"] = auth
    return auth


async def require_auth(info: strawberry.Info, action: str) -> AuthContext:
    """Return the caller's auth context or fail with "Authentication required"."""
    auth_context = await get_auth_context_from_info(info)
    if not auth_context or not auth_context.is_authenticated:
        raise AuthenticationError(f"Authentication required to {action}")
    return auth_context


def is_owner(record: Owned, auth_context: AuthContext | None) -> bool:
    """Check whether the authenticated caller is the owner of ``record``."""
    if not auth_context or not auth_context.is_authenticated:
        return False
    return record.owner_id == auth_context.user_id


def ensure_owner(record: Owned, auth_context: AuthContext, kind: str) -> None:
    """
    Raise AuthorizationError unless the caller owns ``record``.

    Args:
        record: Project or task row carrying ``owner_id``
        auth_context: Authenticated caller
        kind: Human name of the record type for the error message
    """
    if not is_owner(record, auth_context):
        logger.info(
            "Permission denied",
            kind=kind,
            record_id=str(record.id),
            user_id=str(auth_context.user_id),
        )
        raise AuthorizationError(f"Insufficient permission: only the owner can modify this {kind}")

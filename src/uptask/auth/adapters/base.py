"""Token adapter interface and the errors raised by authentication code."""

from __future__ import annotations

from typing import Any, Literal, NotRequired, Protocol, TypedDict
from uuid import UUID


class Principal(TypedDict):
    """Verified identity carried by a session token."""

    provider: Literal["jwt"]
    subject: str  # user id as a string
    email: NotRequired[str]
    display_name: NotRequired[str]
    claims: NotRequired[dict[str, Any]]


class AuthAdapter(Protocol):
    async def verify_token(self, token: str) -> Principal:
        """Raises AuthenticationError for any token that cannot be trusted."""
        ...

    async def issue_token(
        self, user_id: UUID | None = None, claims: dict[str, Any] | None = None
    ) -> str: ...


class AuthenticationError(Exception):
    """The caller could not be identified: bad credentials, bad token or no token."""


class AuthorizationError(Exception):
    """The caller is known but may not act on the requested record."""

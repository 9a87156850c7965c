"""HS256 session tokens issued at login and verified on every request."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from ...logging import get_logger
from .base import AuthenticationError, Principal

logger = get_logger(__name__)

# Claims set by the adapter itself; callers cannot override them
REGISTERED_CLAIMS = frozenset({"iss", "aud", "iat", "nbf", "exp"})


class JWTAuthAdapter:
    """Sign and verify session tokens with a shared secret."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "uptask",
        audience: str = "uptask-api",
        token_expiry_hours: int = 2,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.lifetime = timedelta(hours=token_expiry_hours)

    def build_payload(
        self, user_id: UUID | None, claims: dict[str, Any] | None, now: datetime
    ) -> dict[str, Any]:
        payload = {k: v for k, v in (claims or {}).items() if k not in REGISTERED_CLAIMS}
        if user_id is not None:
            payload["sub"] = str(user_id)
        payload.update(
            iss=self.issuer,
            aud=self.audience,
            iat=now,
            nbf=now,
            exp=now + self.lifetime,
        )
        return payload

    async def issue_token(
        self, user_id: UUID | None = None, claims: dict[str, Any] | None = None
    ) -> str:
        """Sign a token for ``user_id`` that expires after the configured lifetime."""
        payload = self.build_payload(user_id, claims, datetime.now(UTC))
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    async def verify_token(self, token: str) -> Principal:
        """Check signature, issuer, audience and validity window, then build a principal.

        Raises:
            AuthenticationError: the token is expired, forged, malformed or has no subject
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"require": ["exp", "iss", "aud"]},
            )
        except ExpiredSignatureError as e:
            logger.info("Expired token presented")
            raise AuthenticationError("Invalid token: expired") from e
        except InvalidTokenError as e:
            logger.warning("Token rejected", error=str(e))
            raise AuthenticationError("Invalid token") from e

        subject = payload.get("sub")
        if not subject:
            raise AuthenticationError("Missing 'sub' claim in token")

        principal = Principal(provider="jwt", subject=str(subject), claims=payload)
        if email := payload.get("email"):
            principal["email"] = email
        if name := payload.get("name"):
            principal["display_name"] = name
        return principal

"""Who is making the current request."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from .adapters.base import Principal


@dataclass(frozen=True)
class AuthContext:
    user_id: UUID | None = None
    principal: Principal | None = None
    token: str | None = None

    @classmethod
    def anonymous(cls) -> AuthContext:
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None and self.principal is not None


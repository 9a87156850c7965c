"""Authentication adapters."""

from .base import AuthAdapter, AuthenticationError, AuthorizationError, Principal
from .jwt import JWTAuthAdapter

__all__ = [
    "AuthAdapter",
    "AuthenticationError",
    "AuthorizationError",
    "Principal",
    "JWTAuthAdapter",
]

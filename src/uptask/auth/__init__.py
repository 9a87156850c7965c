"""Authentication and authorization system for UpTask."""

from .adapters.base import AuthAdapter, AuthenticationError, AuthorizationError, Principal
from .context import AuthContext
from .factory import get_auth_adapter
from .middleware import get_auth_context_optional, resolve_auth_context
from .passwords import hash_password, verify_password

__all__ = [
    "AuthAdapter",
    "AuthenticationError",
    "AuthorizationError",
    "Principal",
    "AuthContext",
    "get_auth_adapter",
    "get_auth_context_optional",
    "resolve_auth_context",
    "hash_password",
    "verify_password",
]

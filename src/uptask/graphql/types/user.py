"""
User GraphQL type definitions
"""

from datetime import datetime
from uuid import UUID

import strawberry


@strawberry.type
class User:
    """User type for GraphQL API. The password hash is never exposed."""

    id: UUID
    email: str
    name: str
    created_at: datetime


@strawberry.type
class Token:
    """Signed session token returned by ``authenticateUser``."""

    token: str

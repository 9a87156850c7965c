"""
Task GraphQL type definitions
"""

from datetime import datetime
from uuid import UUID

import strawberry


@strawberry.type
class Task:
    """Task type for GraphQL API."""

    id: UUID
    name: str
    status: bool  # completed flag
    project_id: UUID
    owner_id: UUID
    created_at: datetime

"""
Project GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from .task import Task


@strawberry.type
class Project:
    """Project type for GraphQL API."""

    id: UUID
    name: str
    owner_id: UUID
    created_at: datetime

    @strawberry.field
    async def tasks(
        self, info: strawberry.Info
    ) -> list[Annotated["Task", strawberry.lazy(".task")]]:
        """Get the caller's tasks in this project."""
        from ..resolvers.task import resolve_project_tasks

        return await resolve_project_tasks(self, info)

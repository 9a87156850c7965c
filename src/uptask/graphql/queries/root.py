"""
Root GraphQL query definitions
"""

from uuid import UUID

import strawberry

from ..types.project import Project
from ..types.task import Task
from ..types.user import User


@strawberry.input
class ProjectTasksInput:
    """Selects the project whose tasks are listed."""

    project: UUID


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def me(self, info: strawberry.Info) -> User | None:
        """Get the current authenticated user."""
        from ..resolvers.auth import resolve_current_user

        return await resolve_current_user(info)

    @strawberry.field
    async def projects(self, info: strawberry.Info) -> list[Project]:
        """Get the projects owned by the current user."""
        from ..resolvers.project import resolve_my_projects

        return await resolve_my_projects(info)

    @strawberry.field
    async def tasks(self, info: strawberry.Info, input: ProjectTasksInput) -> list[Task]:
        """Get the current user's tasks in a project."""
        from ..resolvers.task import resolve_tasks

        return await resolve_tasks(info, input.project)

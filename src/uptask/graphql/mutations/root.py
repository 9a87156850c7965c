"""
Root GraphQL mutation definitions
"""

from uuid import UUID

import strawberry

from ..types.project import Project
from ..types.task import Task
from ..types.user import Token


# Input types for mutations
@strawberry.input
class RegisterUserInput:
    """Input for registering a new user."""

    name: str
    email: str
    password: str


@strawberry.input
class AuthenticateInput:
    """Input for exchanging credentials for a session token."""

    email: str
    password: str


@strawberry.input
class ProjectInput:
    """Input for creating a project."""

    name: str


@strawberry.input
class UpdateProjectInput:
    """Input for updating a project. Omitted fields are left unchanged."""

    name: str | None = None


@strawberry.input
class TaskInput:
    """Input for creating a task inside a project."""

    name: str
    project: UUID


@strawberry.input
class UpdateTaskInput:
    """Input for updating a task. Omitted fields are left unchanged."""

    name: str | None = None


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # User mutations
    @strawberry.mutation(name="registerUser")
    async def register_user(self, info: strawberry.Info, input: RegisterUserInput) -> str:
        """Register a new user account."""
        from ..resolvers.auth import register_user

        return await register_user(info, input)

    @strawberry.mutation(name="authenticateUser")
    async def authenticate_user(self, info: strawberry.Info, input: AuthenticateInput) -> Token:
        """Check credentials and issue a session token."""
        from ..resolvers.auth import authenticate_user

        return await authenticate_user(info, input)

    # Project mutations
    @strawberry.mutation(name="createProject")
    async def create_project(self, info: strawberry.Info, input: ProjectInput) -> Project:
        """Create a new project owned by the caller."""
        from ..resolvers.project import create_project

        return await create_project(info, input)

    @strawberry.mutation(name="updateProject")
    async def update_project(
        self, info: strawberry.Info, id: UUID, input: UpdateProjectInput
    ) -> Project:
        """Update one of the caller's projects."""
        from ..resolvers.project import update_project

        return await update_project(info, id, input)

    @strawberry.mutation(name="deleteProject")
    async def delete_project(self, info: strawberry.Info, id: UUID) -> str:
        """Delete one of the caller's projects and its tasks."""
        from ..resolvers.project import delete_project

        return await delete_project(info, id)

    # Task mutations
    @strawberry.mutation(name="createTask")
    async def create_task(self, info: strawberry.Info, input: TaskInput) -> Task:
        """Create a new task in one of the caller's projects."""
        from ..resolvers.task import create_task

        return await create_task(info, input)

    @strawberry.mutation(name="updateTask")
    async def update_task(
        self,
        info: strawberry.Info,
        id: UUID,
        input: UpdateTaskInput | None = None,
        status: bool | None = None,
    ) -> Task:
        """Update one of the caller's tasks; ``status`` marks it completed or pending."""
        from ..resolvers.task import update_task

        return await update_task(info, id, input, status)

    @strawberry.mutation(name="deleteTask")
    async def delete_task(self, info: strawberry.Info, id: UUID) -> str:
        """Delete one of the caller's tasks."""
        from ..resolvers.task import delete_task

        return await delete_task(info, id)

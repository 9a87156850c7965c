from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ...database import repository
from ...database.connection import get_async_session
from ...logging import get_logger
from ..access_control import ensure_owner, require_auth

if TYPE_CHECKING:
    from ...dbmodels import Projects
    from ..mutations.root import ProjectInput, UpdateProjectInput
    from ..types.project import Project

logger = get_logger(__name__)


def to_project_type(project: Projects) -> Project:
    from ..types.project import Project as ProjectType

    return ProjectType(
        id=project.id,
        name=project.name,
        owner_id=project.owner_id,
        created_at=project.created_at,
    )


def clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Name is required")
    return cleaned


# Query resolvers
async def resolve_my_projects(info: strawberry.Info) -> list[Project]:
    """Resolve the projects owned by the authenticated user."""
    auth_context = await require_auth(info, "list projects")

    async with get_async_session() as session:
        projects = await repository.find_projects_by_owner(session, auth_context.user_id)
        return [to_project_type(project) for project in projects]


# Mutation resolvers
async def create_project(info: strawberry.Info, input: ProjectInput) -> Project:
    """
    Create a new project.

    The authenticated user becomes the owner of the project.
    """
    auth_context = await require_auth(info, "create a project")
    name = clean_name(input.name)

    async with get_async_session() as session:
        project = await repository.insert_project(
            session, owner_id=auth_context.user_id, name=name
        )

        logger.info(
            "Project created",
            project_id=str(project.id),
            user_id=str(auth_context.user_id),
        )

        return to_project_type(project)


async def update_project(info: strawberry.Info, id: UUID, input: UpdateProjectInput) -> Project:
    """
    Update an existing project.

    Only the project owner can update it.
    """
    auth_context = await require_auth(info, "update a project")

    async with get_async_session() as session:
        project = await repository.find_project(session, id)
        if not project:
            raise RuntimeError("Project not found")

        ensure_owner(project, auth_context, "project")

        changes = {"name": clean_name(input.name) if input.name is not None else None}
        project = await repository.update_project(session, project, changes)

        logger.info(
            "Project updated",
            project_id=str(project.id),
            user_id=str(auth_context.user_id),
            updated_fields=[k for k, v in changes.items() if v is not None],
        )

        return to_project_type(project)


async def delete_project(info: strawberry.Info, id: UUID) -> str:
    """
    Delete a project and its tasks.

    Only the project owner can delete it.
    """
    auth_context = await require_auth(info, "delete a project")

    async with get_async_session() as session:
        project = await repository.find_project(session, id)
        if not project:
            raise RuntimeError("Project not found")

        ensure_owner(project, auth_context, "project")

        await repository.delete_project(session, project)

        logger.info("Project deleted", project_id=str(id), user_id=str(auth_context.user_id))

    return "Project deleted."

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ...database import repository
from ...database.connection import get_async_session
from ...logging import get_logger
from ..access_control import ensure_owner, get_auth_context_from_info, is_owner, require_auth
from .project import clean_name

if TYPE_CHECKING:
    from ...dbmodels import Tasks
    from ..mutations.root import TaskInput, UpdateTaskInput
    from ..types.project import Project
    from ..types.task import Task

logger = get_logger(__name__)


def to_task_type(task: Tasks) -> Task:
    from ..types.task import Task as TaskType

    return TaskType(
        id=task.id,
        name=task.name,
        status=task.status,
        project_id=task.project_id,
        owner_id=task.owner_id,
        created_at=task.created_at,
    )


# Query resolvers
async def resolve_tasks(info: strawberry.Info, project_id: UUID) -> list[Task]:
    """
    Resolve the caller's tasks in a project.

    Only tasks whose project and owner both match are returned.
    """
    auth_context = await require_auth(info, "list tasks")

    async with get_async_session() as session:
        tasks = await repository.find_tasks(
            session, owner_id=auth_context.user_id, project_id=project_id
        )
        return [to_task_type(task) for task in tasks]


# Project field resolvers
async def resolve_project_tasks(project: Project, info: strawberry.Info) -> list[Task]:
    """Resolve tasks for a project. Non-owners see an empty list."""
    auth_context = await get_auth_context_from_info(info)
    if not is_owner(project, auth_context):
        return []

    async with get_async_session() as session:
        tasks = await repository.find_tasks(
            session, owner_id=project.owner_id, project_id=project.id
        )
        return [to_task_type(task) for task in tasks]


# Mutation resolvers
async def create_task(info: strawberry.Info, input: TaskInput) -> Task:
    """
    Create a new task in a project.

    The project must exist and belong to the caller, who becomes the task owner.
    """
    auth_context = await require_auth(info, "create a task")
    name = clean_name(input.name)

    async with get_async_session() as session:
        project = await repository.find_project(session, input.project)
        if not project:
            raise RuntimeError("Project not found")

        ensure_owner(project, auth_context, "project")

        task = await repository.insert_task(
            session, owner_id=auth_context.user_id, project_id=project.id, name=name
        )

        logger.info(
            "Task created",
            task_id=str(task.id),
            project_id=str(project.id),
            user_id=str(auth_context.user_id),
        )

        return to_task_type(task)


async def update_task(
    info: strawberry.Info,
    id: UUID,
    input: UpdateTaskInput | None,
    status: bool | None,
) -> Task:
    """
    Update an existing task.

    Only the task owner can update it. ``status`` is applied alongside the
    other fields when given.
    """
    auth_context = await require_auth(info, "update a task")

    async with get_async_session() as session:
        task = await repository.find_task(session, id)
        if not task:
            raise RuntimeError("Task not found")

        ensure_owner(task, auth_context, "task")

        changes = {
            "name": clean_name(input.name) if input and input.name is not None else None,
            "status": status,
        }
        task = await repository.update_task(session, task, changes)

        logger.info(
            "Task updated",
            task_id=str(task.id),
            user_id=str(auth_context.user_id),
            updated_fields=[k for k, v in changes.items() if v is not None],
        )

        return to_task_type(task)


async def delete_task(info: strawberry.Info, id: UUID) -> str:
    """
    Delete a task.

    Only the task owner can delete it.
    """
    auth_context = await require_auth(info, "delete a task")

    async with get_async_session() as session:
        task = await repository.find_task(session, id)
        if not task:
            raise RuntimeError("Task not found")

        ensure_owner(task, auth_context, "task")

        await repository.delete_task(session, task)

        logger.info("Task deleted", task_id=str(id), user_id=str(auth_context.user_id))

    return "Task deleted."

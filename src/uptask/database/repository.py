"""Find/insert/update/delete helpers for users, projects and tasks."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Projects, Tasks, Users


# Users
async def find_user_by_email(session: AsyncSession, email: str) -> Users | None:
    stmt = select(Users).where(Users.email == email)
    res = await session.execute(stmt)
    return res.scalar_one_or_none()


async def find_user_by_id(session: AsyncSession, user_id: UUID) -> Users | None:
    stmt = select(Users).where(Users.id == user_id)
    res = await session.execute(stmt)
    return res.scalar_one_or_none()


async def insert_user(session: AsyncSession, *, email: str, password: str, name: str) -> Users:
    user = Users(email=email, password=password, name=name)
    session.add(user)
    await session.flush()
    return user


# Projects
async def find_project(session: AsyncSession, project_id: UUID) -> Projects | None:
    stmt = select(Projects).where(Projects.id == project_id)
    res = await session.execute(stmt)
    return res.scalar_one_or_none()


async def find_projects_by_owner(session: AsyncSession, owner_id: UUID) -> list[Projects]:
    stmt = (
        select(Projects)
        .where(Projects.owner_id == owner_id)
        .order_by(Projects.created_at.asc(), Projects.id.asc())
    )
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def insert_project(session: AsyncSession, *, owner_id: UUID, name: str) -> Projects:
    project = Projects(owner_id=owner_id, name=name)
    session.add(project)
    await session.flush()
    return project


async def update_project(
    session: AsyncSession, project: Projects, changes: dict[str, Any]
) -> Projects:
    """Apply a partial update. ``None`` values leave the field unchanged."""
    for field, value in changes.items():
        if value is not None:
            setattr(project, field, value)
    await session.flush()
    return project


async def delete_project(session: AsyncSession, project: Projects) -> None:
    """Delete a project along with its tasks."""
    await session.execute(delete(Tasks).where(Tasks.project_id == project.id))
    await session.delete(project)
    await session.flush()


# Tasks
async def find_task(session: AsyncSession, task_id: UUID) -> Tasks | None:
    stmt = select(Tasks).where(Tasks.id == task_id)
    res = await session.execute(stmt)
    return res.scalar_one_or_none()


async def find_tasks(session: AsyncSession, *, owner_id: UUID, project_id: UUID) -> list[Tasks]:
    stmt = (
        select(Tasks)
        .where(Tasks.owner_id == owner_id, Tasks.project_id == project_id)
        .order_by(Tasks.created_at.asc(), Tasks.id.asc())
    )
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def insert_task(
    session: AsyncSession, *, owner_id: UUID, project_id: UUID, name: str
) -> Tasks:
    task = Tasks(owner_id=owner_id, project_id=project_id, name=name, status=False)
    session.add(task)
    await session.flush()
    return task


async def update_task(session: AsyncSession, task: Tasks, changes: dict[str, Any]) -> Tasks:
    """Apply a partial update. ``None`` values leave the field unchanged."""
    for field, value in changes.items():
        if value is not None:
            setattr(task, field, value)
    await session.flush()
    return task


async def delete_task(session: AsyncSession, task: Tasks) -> None:
    await session.delete(task)
    await session.flush()

"""
Integration tests for task resolvers against a real database
"""

import uuid
from datetime import UTC, datetime

import pytest
import pytest_asyncio

from uptask.auth.adapters.base import AuthenticationError, AuthorizationError
from uptask.database import repository
from uptask.database.connection import get_async_session
from uptask.dbmodels import Tasks
from uptask.graphql.mutations.root import ProjectInput, TaskInput, UpdateTaskInput
from uptask.graphql.resolvers.project import create_project
from uptask.graphql.resolvers.task import (
    create_task,
    delete_task,
    resolve_project_tasks,
    resolve_tasks,
    update_task,
)

pytestmark = [pytest.mark.integration, pytest.mark.requires_db]


@pytest_asyncio.fixture
async def owner(test_database, register_and_login):
    return await register_and_login("owner@example.com")


@pytest_asyncio.fixture
async def intruder(test_database, register_and_login):
    return await register_and_login("intruder@example.com")


@pytest_asyncio.fixture
async def project(owner, make_info):
    token, _ = owner
    return await create_project(make_info(token), ProjectInput(name="Website"))


class TestCreateTask:
    @pytest.mark.asyncio
    async def test_task_belongs_to_caller_and_project(self, owner, project, make_info):
        token, user_id = owner

        task = await create_task(make_info(token), TaskInput(name="Design", project=project.id))

        assert task.name == "Design"
        assert task.status is False
        assert task.project_id == project.id
        assert task.owner_id == user_id

    @pytest.mark.asyncio
    async def test_cannot_add_task_to_someone_elses_project(self, intruder, project, make_info):
        token, _ = intruder

        with pytest.raises(AuthorizationError, match="Insufficient permission"):
            await create_task(make_info(token), TaskInput(name="Sneaky", project=project.id))

    @pytest.mark.asyncio
    async def test_project_must_exist(self, owner, make_info):
        token, _ = owner

        with pytest.raises(RuntimeError, match="Project not found"):
            await create_task(make_info(token), TaskInput(name="Orphan", project=uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_requires_authentication(self, project, make_info):
        with pytest.raises(AuthenticationError, match="Authentication required"):
            await create_task(make_info(), TaskInput(name="Anon", project=project.id))


class TestListTasks:
    @pytest.mark.asyncio
    async def test_only_tasks_matching_project_and_owner(
        self, owner, intruder, project, make_info
    ):
        token, user_id = owner
        intruder_token, intruder_id = intruder

        other_project = await create_project(make_info(token), ProjectInput(name="Other"))
        await create_task(make_info(token), TaskInput(name="A", project=project.id))
        await create_task(make_info(token), TaskInput(name="B", project=project.id))
        await create_task(make_info(token), TaskInput(name="C", project=other_project.id))

        # A stray row owned by someone else in the same project must not leak through
        async with get_async_session() as session:
            await repository.insert_task(
                session, owner_id=intruder_id, project_id=project.id, name="Stray"
            )

        tasks = await resolve_tasks(make_info(token), project.id)

        assert {t.name for t in tasks} == {"A", "B"}
        assert all(t.project_id == project.id and t.owner_id == user_id for t in tasks)

        assert await resolve_tasks(make_info(intruder_token), other_project.id) == []

    @pytest.mark.asyncio
    async def test_same_timestamp_orders_by_id(self, owner, project, make_info):
        token, user_id = owner
        created_at = datetime(2026, 1, 1, tzinfo=UTC)
        ids = sorted(uuid.uuid4() for _ in range(3))

        async with get_async_session() as session:
            for task_id in reversed(ids):
                session.add(
                    Tasks(
                        id=task_id,
                        name="Tie",
                        status=False,
                        project_id=project.id,
                        owner_id=user_id,
                        created_at=created_at,
                    )
                )

        tasks = await resolve_tasks(make_info(token), project.id)

        assert [t.id for t in tasks] == ids

    @pytest.mark.asyncio
    async def test_project_field_resolver_hides_tasks_from_non_owners(
        self, owner, intruder, project, make_info
    ):
        token, _ = owner
        intruder_token, _ = intruder
        await create_task(make_info(token), TaskInput(name="A", project=project.id))

        assert [t.name for t in await resolve_project_tasks(project, make_info(token))] == ["A"]
        assert await resolve_project_tasks(project, make_info(intruder_token)) == []


class TestUpdateTask:
    @pytest.mark.asyncio
    async def test_status_and_name_update(self, owner, project, make_info):
        token, _ = owner
        task = await create_task(make_info(token), TaskInput(name="Draft", project=project.id))

        done = await update_task(make_info(token), task.id, None, True)
        assert done.status is True
        assert done.name == "Draft"

        renamed = await update_task(make_info(token), task.id, UpdateTaskInput(name="Final"), None)
        assert renamed.name == "Final"
        assert renamed.status is True

        reopened = await update_task(make_info(token), task.id, UpdateTaskInput(), False)
        assert reopened.status is False

    @pytest.mark.asyncio
    async def test_other_user_cannot_update(self, owner, intruder, project, make_info):
        token, _ = owner
        intruder_token, _ = intruder
        task = await create_task(make_info(token), TaskInput(name="Mine", project=project.id))

        with pytest.raises(AuthorizationError):
            await update_task(make_info(intruder_token), task.id, UpdateTaskInput(name="X"), True)

        [unchanged] = await resolve_tasks(make_info(token), project.id)
        assert unchanged.name == "Mine"
        assert unchanged.status is False

    @pytest.mark.asyncio
    async def test_missing_task(self, owner, make_info):
        token, _ = owner

        with pytest.raises(RuntimeError, match="Task not found"):
            await update_task(make_info(token), uuid.uuid4(), None, True)


class TestDeleteTask:
    @pytest.mark.asyncio
    async def test_owner_can_delete(self, owner, project, make_info):
        token, _ = owner
        task = await create_task(make_info(token), TaskInput(name="Gone", project=project.id))

        assert await delete_task(make_info(token), task.id) == "Task deleted."
        assert await resolve_tasks(make_info(token), project.id) == []

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(self, owner, intruder, project, make_info):
        token, _ = owner
        intruder_token, _ = intruder
        task = await create_task(make_info(token), TaskInput(name="Mine", project=project.id))

        with pytest.raises(AuthorizationError):
            await delete_task(make_info(intruder_token), task.id)

        assert len(await resolve_tasks(make_info(token), project.id)) == 1

    @pytest.mark.asyncio
    async def test_missing_task(self, owner, make_info):
        token, _ = owner

        with pytest.raises(RuntimeError, match="Task not found"):
            await delete_task(make_info(token), uuid.uuid4())

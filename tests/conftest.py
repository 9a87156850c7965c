"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
import strawberry

TEST_JWT_SECRET = "test-secret-key-for-testing-only-0123456789"


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    """Sign and verify tokens with a fixed test secret."""
    monkeypatch.setenv("UPTASK_JWT_SECRET", TEST_JWT_SECRET)
    return TEST_JWT_SECRET


@pytest_asyncio.fixture(scope="function")
async def test_database(tmp_path: Path) -> AsyncGenerator[str, None]:
    """Point the shared connection pool at a fresh SQLite file with all tables created."""
    from uptask.database.connection import (
        create_schema,
        dispose_database,
        init_database,
        reset_database,
    )

    dsn = f"sqlite:///{tmp_path / 'uptask-test.db'}"
    os.environ["UPTASK_DATABASE_URL"] = dsn

    reset_database()
    init_database(dsn, force_reinit=True)
    await create_schema()

    yield dsn

    await dispose_database()


@pytest.fixture
def make_info() -> Callable[[str | None], Any]:
    """Build a GraphQL info object whose request carries an optional bearer token."""

    def _make(token: str | None = None) -> Any:
        headers = {"authorization": f"Bearer {token}"} if token else {}
        info = MagicMock(spec=strawberry.Info)
        info.context = {"request": MagicMock(headers=headers)}
        return info

    return _make


@pytest.fixture
def register_and_login(make_info: Callable[[str | None], Any]):
    """Register a user through the resolvers and return ``(token, user_id)``."""
    from uptask.auth.middleware import resolve_auth_context
    from uptask.graphql.mutations.root import AuthenticateInput, RegisterUserInput
    from uptask.graphql.resolvers.auth import authenticate_user, register_user

    async def _register(email: str, password: str = "s3cret-pass", name: str = "Test User"):
        await register_user(
            make_info(None), RegisterUserInput(name=name, email=email, password=password)
        )
        result = await authenticate_user(
            make_info(None), AuthenticateInput(email=email, password=password)
        )
        auth_context = await resolve_auth_context(f"Bearer {result.token}")
        return result.token, auth_context.user_id

    return _register


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(  # type: ignore[reportUnknownMemberType]
        "markers", "requires_db: mark test as requiring database connection"
    )
    config.addinivalue_line("markers", "integration: mark test as integration test")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]

"""
Integration tests for registration and login resolvers against a real database
"""

import pytest
from argon2 import PasswordHasher
from sqlalchemy import select

from uptask.auth.adapters.base import AuthenticationError
from uptask.auth.middleware import resolve_auth_context
from uptask.auth.passwords import needs_rehash, verify_password
from uptask.database import repository
from uptask.database.connection import get_async_session
from uptask.dbmodels import Users
from uptask.graphql.mutations.root import AuthenticateInput, RegisterUserInput
from uptask.graphql.resolvers.auth import (
    authenticate_user,
    register_user,
    resolve_current_user,
)

pytestmark = [pytest.mark.integration, pytest.mark.requires_db]


def registration(email="ana@example.com", password="s3cret-pass", name="Ana"):
    return RegisterUserInput(name=name, email=email, password=password)


class TestRegisterUser:
    @pytest.mark.asyncio
    async def test_register_stores_hashed_password(self, test_database, make_info):
        message = await register_user(make_info(), registration())

        assert message == "User created successfully."

        async with get_async_session() as session:
            result = await session.execute(select(Users).where(Users.email == "ana@example.com"))
            user = result.scalar_one()

        assert user.name == "Ana"
        assert user.password != "s3cret-pass"
        assert user.password.startswith("$argon2")

    @pytest.mark.asyncio
    async def test_register_same_email_twice_fails(self, test_database, make_info):
        await register_user(make_info(), registration())

        with pytest.raises(RuntimeError, match="already registered"):
            await register_user(make_info(), registration(name="Someone Else"))

    @pytest.mark.asyncio
    async def test_email_is_normalized_before_uniqueness_check(self, test_database, make_info):
        await register_user(make_info(), registration(email="ana@example.com"))

        with pytest.raises(RuntimeError, match="already registered"):
            await register_user(make_info(), registration(email="  ANA@Example.com "))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [{"email": "not-an-email"}, {"name": "   "}, {"password": ""}],
    )
    async def test_register_rejects_incomplete_input(self, test_database, make_info, overrides):
        with pytest.raises(ValueError):
            await register_user(make_info(), registration(**overrides))


class TestAuthenticateUser:
    @pytest.mark.asyncio
    async def test_login_with_correct_password_returns_usable_token(
        self, test_database, make_info
    ):
        await register_user(make_info(), registration())

        result = await authenticate_user(
            make_info(), AuthenticateInput(email="ana@example.com", password="s3cret-pass")
        )

        auth_context = await resolve_auth_context(f"Bearer {result.token}")
        assert auth_context.is_authenticated
        assert auth_context.principal["email"] == "ana@example.com"
        assert auth_context.principal["display_name"] == "Ana"

        me = await resolve_current_user(make_info(result.token))
        assert me is not None
        assert me.id == auth_context.user_id
        assert me.email == "ana@example.com"

    @pytest.mark.asyncio
    async def test_login_with_wrong_password_fails(self, test_database, make_info):
        await register_user(make_info(), registration())

        with pytest.raises(AuthenticationError, match="Incorrect password"):
            await authenticate_user(
                make_info(), AuthenticateInput(email="ana@example.com", password="wrong")
            )

    @pytest.mark.asyncio
    async def test_login_with_unknown_email_fails(self, test_database, make_info):
        with pytest.raises(AuthenticationError, match="does not exist"):
            await authenticate_user(
                make_info(), AuthenticateInput(email="nobody@example.com", password="x")
            )

    @pytest.mark.asyncio
    async def test_login_email_is_case_insensitive(self, test_database, make_info):
        await register_user(make_info(), registration())

        result = await authenticate_user(
            make_info(), AuthenticateInput(email="Ana@Example.COM", password="s3cret-pass")
        )

        assert result.token


    @pytest.mark.asyncio
    async def test_login_upgrades_weak_password_hash(self, test_database, make_info):
        weak_hash = PasswordHasher(time_cost=1, memory_cost=8192).hash("s3cret-pass")
        async with get_async_session() as session:
            await repository.insert_user(
                session, email="ana@example.com", password=weak_hash, name="Ana"
            )

        await authenticate_user(
            make_info(), AuthenticateInput(email="ana@example.com", password="s3cret-pass")
        )

        async with get_async_session() as session:
            user = await repository.find_user_by_email(session, "ana@example.com")

        assert user.password != weak_hash
        assert not needs_rehash(user.password)
        assert verify_password(user.password, "s3cret-pass")


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_anonymous_request_has_no_current_user(self, test_database, make_info):
        assert await resolve_current_user(make_info()) is None

    @pytest.mark.asyncio
    async def test_invalid_token_has_no_current_user(self, test_database, make_info):
        assert await resolve_current_user(make_info("garbage")) is None

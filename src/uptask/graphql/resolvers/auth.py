from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy.exc import IntegrityError

from ...auth.adapters.base import AuthenticationError
from ...auth.factory import get_auth_adapter
from ...auth.passwords import hash_password_async, needs_rehash, verify_password_async
from ...database import repository
from ...database.connection import get_async_session
from ...logging import get_logger
from ..access_control import get_auth_context_from_info

if TYPE_CHECKING:
    from ...dbmodels import Users
    from ..mutations.root import AuthenticateInput, RegisterUserInput
    from ..types.user import Token, User

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def to_user_type(user: Users) -> User:
    from ..types.user import User as UserType

    return UserType(
        id=user.id,
        email=user.email,
        name=user.name,
        created_at=user.created_at,
    )


async def register_user(info: strawberry.Info, input: RegisterUserInput) -> str:
    """
    Register a new user.

    Fails if the email is already registered. The password is stored as a
    salted argon2 hash.
    """
    email = normalize_email(input.email)
    name = input.name.strip()
    if not email or "@" not in email:
        raise ValueError("A valid email is required")
    if not name:
        raise ValueError("Name is required")
    if not input.password:
        raise ValueError("Password is required")

    async with get_async_session() as session:
        existing = await repository.find_user_by_email(session, email)
        if existing:
            raise RuntimeError("User is already registered")

        password_hash = await hash_password_async(input.password)

        try:
            user = await repository.insert_user(
                session, email=email, password=password_hash, name=name
            )
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            raise RuntimeError("User is already registered") from e

        logger.info("User registered", user_id=str(user.id))

    return "User created successfully."


async def authenticate_user(info: strawberry.Info, input: AuthenticateInput) -> Token:
    """
    Exchange email and password for a signed, time-limited token.

    The token carries the user id as ``sub`` plus ``email`` and ``name`` claims.
    """
    email = normalize_email(input.email)

    async with get_async_session() as session:
        user = await repository.find_user_by_email(session, email)
        if not user:
            logger.info("Login for unknown email")
            raise AuthenticationError("User does not exist")

        if not await verify_password_async(user.password, input.password):
            logger.info("Login with incorrect password", user_id=str(user.id))
            raise AuthenticationError("Incorrect password")

        if needs_rehash(user.password):
            user.password = await hash_password_async(input.password)
            logger.info("Password hash upgraded", user_id=str(user.id))

        token = await get_auth_adapter().issue_token(
            user.id, claims={"email": user.email, "name": user.name}
        )

        logger.info("User authenticated", user_id=str(user.id))

    from ..types.user import Token as TokenType

    return TokenType(token=token)


async def resolve_current_user(info: strawberry.Info) -> User | None:
    """Resolve the authenticated caller, or None for anonymous requests."""
    auth_context = await get_auth_context_from_info(info)
    if not auth_context or not auth_context.is_authenticated or auth_context.user_id is None:
        return None

    async with get_async_session() as session:
        user = await repository.find_user_by_id(session, auth_context.user_id)
        if not user:
            logger.info("Token subject has no user", user_id=str(auth_context.user_id))
            return None

        return to_user_type(user)

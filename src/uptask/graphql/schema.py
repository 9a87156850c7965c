"""
GraphQL schema, request context and FastAPI router.
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import GraphQLError, get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter
from strawberry.types import ExecutionContext

from ..auth.adapters.base import AuthenticationError, AuthorizationError
from ..auth.middleware import get_auth_context_optional
from ..config import settings
from ..logging import get_logger
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)

# Errors resolvers raise on purpose; anything else is a bug worth a traceback
EXPECTED_ERRORS = (AuthenticationError, AuthorizationError, ValueError, RuntimeError)


class UpTaskSchema(strawberry.Schema):
    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        for error in errors:
            original = error.original_error
            if original is None or isinstance(original, EXPECTED_ERRORS):
                logger.info("GraphQL request rejected", error=error.message, path=error.path)
            else:
                logger.error(
                    "GraphQL resolver crashed",
                    error=error.message,
                    path=error.path,
                    exc_info=original,
                )


schema = UpTaskSchema(query=Query, mutation=Mutation)


def validate_schema() -> None:
    """Fail at startup if the schema is inconsistent or cannot be introspected.

    Raises:
        RuntimeError: describing every problem found
    """
    graphql_schema = schema._schema

    problems = [str(e) for e in gql_validate_schema(graphql_schema)]
    if not problems:
        result = graphql_sync(graphql_schema, get_introspection_query())
        problems = [str(e) for e in result.errors or []]

    if problems:
        logger.error("GraphQL schema is invalid", problems=problems)
        raise RuntimeError(f"GraphQL schema is invalid: {'; '.join(problems)}")

    logger.info("GraphQL schema validated", types=len(graphql_schema.type_map))


async def get_context(request: Request) -> dict[str, Any]:
    """Resolver context; the caller is resolved once per request."""
    return {
        "request": request,
        "auth": await get_auth_context_optional(
            authorization=request.headers.get("authorization")
        ),
    }


def create_graphql_router() -> GraphQLRouter[dict[str, Any], None]:
    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if settings.debug else None,
        context_getter=get_context,
    )

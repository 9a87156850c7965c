"""
Per-request logging middleware.
"""

import json
import re
import time
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .auth.adapters.base import AuthenticationError
from .auth.middleware import resolve_auth_context
from .logging import (
    clear_request_context,
    get_logger,
    get_request_id,
    set_request_context,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
GRAPHQL_PATH = "/graphql"

# Substrings that mark a query parameter as secret
SENSITIVE_KEYS = frozenset(
    {"password", "token", "secret", "auth", "jwt", "session", "cookie", "credential"}
)

# Parts of a GET GraphQL request that may embed passwords in literals
GRAPHQL_PAYLOAD_PARAMS = ("query", "variables", "extensions")

_OPERATION_RE = re.compile(r"^\s*(query|mutation|subscription)\s+([_A-Za-z]\w*)")


def sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``params`` with secret-looking values replaced."""
    return {
        key: "[REDACTED]" if any(s in key.lower() for s in SENSITIVE_KEYS) else value
        for key, value in params.items()
    }


def operation_name_from_query(query: str) -> str | None:
    """Best-effort label for a raw GraphQL document.

    Named queries give their name, named mutations are prefixed with
    ``mutation:``, introspection is ``__introspection`` and anything else
    non-empty is ``unnamed_operation``.
    """
    if not query or not query.strip():
        return None
    if "__schema" in query:
        return "__introspection"

    match = _OPERATION_RE.match(query)
    if not match:
        return "unnamed_operation"

    kind, name = match.groups()
    return name if kind == "query" else f"{kind}:{name}"


async def _read_graphql_payload(request: Request) -> dict[str, Any]:
    if request.method == "GET":
        return dict(request.query_params)
    if request.method != "POST":
        return {}

    body = await request.body()
    if not body:
        return {}
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


async def extract_graphql_operation_name(request: Request) -> str | None:
    """Operation label for a GraphQL request, or None for other paths."""
    if request.url.path != GRAPHQL_PATH:
        return None

    payload = await _read_graphql_payload(request)
    explicit = payload.get("operationName")
    if isinstance(explicit, str) and explicit:
        return explicit

    query = payload.get("query")
    return operation_name_from_query(query) if isinstance(query, str) else None


async def extract_user_id_from_request(request: Request) -> str | None:
    """Caller's user id from the bearer token, used only to tag log lines."""
    try:
        auth_context = await resolve_auth_context(request.headers.get("authorization"))
    except AuthenticationError:
        return None
    return str(auth_context.user_id) if auth_context.user_id else None


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Tag every log line of a request and log its start, end and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        set_request_context(
            request_id=request.headers.get(REQUEST_ID_HEADER),
            user_id=await extract_user_id_from_request(request),
            operation=await extract_graphql_operation_name(request),
        )

        try:
            params = sanitize_query_params(dict(request.query_params))
            if request.url.path == GRAPHQL_PATH:
                for key in GRAPHQL_PAYLOAD_PARAMS:
                    if key in params:
                        params[key] = "[REDACTED]"

            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=params or None,
                remote_addr=request.client.host if request.client else None,
            )

            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = get_request_id() or ""

            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response

        except Exception:
            logger.exception(
                "Request failed",
                method=request.method,
                path=request.url.path,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            raise

        finally:
            clear_request_context()

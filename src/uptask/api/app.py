"""
FastAPI application serving the UpTask GraphQL API
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..database import init_database
from ..database.connection import dispose_database, test_database_connection
from ..graphql.schema import create_graphql_router, validate_schema
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..validation import (
    ValidationError,
    get_startup_recommendations,
    validate_startup_configuration,
)

configure_logging(debug=settings.debug, log_level=settings.log_level)
logger = get_logger(__name__)


async def run_startup_checks() -> None:
    """Log configuration problems; in production they abort startup."""
    results = await validate_startup_configuration()

    if not results["overall_valid"]:
        logger.error(
            "Startup configuration is invalid",
            database_errors=results["database"]["errors"],
            auth_errors=results["auth"]["errors"],
        )
        if settings.is_production:
            raise ValidationError("Refusing to start in production with invalid configuration")

    if recommendations := get_startup_recommendations(results):
        logger.warning("Configuration recommendations", recommendations=recommendations)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting UpTask API", version=__version__, environment=settings.environment)
    init_database()
    await run_startup_checks()

    yield

    logger.info("Stopping UpTask API")
    await dispose_database()


def create_app() -> FastAPI:
    """Build the application: middleware, health endpoint and GraphQL router."""
    validate_schema()

    app = FastAPI(
        title="UpTask API",
        description="Projects and tasks over GraphQL",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        database_ok, _ = await test_database_connection()
        return {
            "status": "healthy" if database_ok else "degraded",
            "database": "ok" if database_ok else "unreachable",
            "version": __version__,
        }

    app.include_router(create_graphql_router())
    return app


app = create_app()

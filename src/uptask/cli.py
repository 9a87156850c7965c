#!/usr/bin/env python3
"""
Main CLI entry point for the UpTask backend server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from uptask import __version__
from uptask.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="uptask")
def cli() -> None:
    """UpTask CLI - run the API server and prepare the database."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=4000, type=int, help="Port to bind to (default: 4000)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option("--workers", default=1, type=int, help="Number of worker processes (default: 1)")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the UpTask API server."""
    configure_logging(debug=(log_level == "debug"), log_level=log_level)

    logger.info(
        "Starting UpTask API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # The app module reads settings at import time, so export them before uvicorn imports it
    if log_level == "debug":
        os.environ["UPTASK_DEBUG"] = "true"
        os.environ["UPTASK_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("UPTASK_DEBUG", "false")
        os.environ.setdefault("UPTASK_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "uptask.api.app:app",
            host=host,
            port=port,
            reload=reload,
            workers=(workers if not reload else 1),  # reload doesn't work with multiple workers
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("init-db")
@click.option(
    "--database-url",
    default=None,
    help="Database URL (defaults to UPTASK_DATABASE_URL)",
)
def init_db(database_url: str | None) -> None:
    """Create all tables directly from the models (local development)."""
    from uptask.database.connection import create_schema, dispose_database, init_database

    configure_logging()

    async def do_init():
        init_database(database_url, force_reinit=True)
        try:
            await create_schema()
        finally:
            await dispose_database()

    try:
        asyncio.run(do_init())
    except Exception as e:
        logger.error("Failed to create database schema", error=str(e))
        click.echo(f"✗ Error creating schema: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Database schema created")


if __name__ == "__main__":
    cli()

#!/usr/bin/env python3
"""
``uptask-migrate``: Alembic migrations for the UpTask database.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import click

from alembic import command
from alembic.config import Config
from uptask import __version__
from uptask.logging import configure_logging, get_logger

logger = get_logger(__name__)

# src/uptask/database/cli.py -> repository root
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_alembic_config() -> Config:
    """Alembic config from the repository root; alembic/env.py reads the database URL."""
    alembic_ini = PROJECT_ROOT / "alembic.ini"
    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return config


def run_alembic(description: str, action: Callable[[Config], None], **log_fields) -> None:
    """Run one Alembic command, exiting with status 1 if it fails."""
    logger.info(description, **log_fields)
    try:
        action(get_alembic_config())
    except Exception as e:
        logger.error(f"{description} failed", error=str(e), **log_fields)
        sys.exit(1)


@click.group()
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.version_option(version=__version__, prog_name="uptask-migrate")
def main(log_level: str) -> None:
    """Manage the UpTask database schema."""
    configure_logging(debug=(log_level == "debug"), log_level=log_level)


@main.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Upgrade to REVISION (default: head)."""
    run_alembic("Upgrading database", lambda c: command.upgrade(c, revision), revision=revision)


@main.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade to REVISION (default: one step back)."""
    run_alembic(
        "Downgrading database", lambda c: command.downgrade(c, revision), revision=revision
    )


@main.command()
@click.argument("revision", default="head")
def stamp(revision: str) -> None:
    """Mark the database as being at REVISION without running migrations.

    Use after ``uptask init-db`` created the tables from the models.
    """
    run_alembic("Stamping database", lambda c: command.stamp(c, revision), revision=revision)


@main.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option("--autogenerate/--no-autogenerate", default=True, help="Diff against the models")
def revision(message: str, autogenerate: bool) -> None:
    """Create a new migration script."""
    run_alembic(
        "Creating migration",
        lambda c: command.revision(c, message=message, autogenerate=autogenerate),
        message=message,
    )


@main.command()
def current() -> None:
    """Show the revision the database is at."""
    run_alembic("Reading current revision", command.current)


@main.command()
def history() -> None:
    """List all migration scripts."""
    run_alembic("Reading migration history", command.history)


if __name__ == "__main__":
    main()

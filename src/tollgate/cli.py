"""Command-line interface for Tollgate.

This module provides the CLI commands for running and managing
the Tollgate service.
"""

import asyncio
from typing import NoReturn

import click

from tollgate import __version__
from tollgate.core.config import get_settings
from tollgate.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="Tollgate")
def cli() -> None:
    """Tollgate - user account and session service.

    Settings are read from TOLLGATE_* environment variables and .env.
    """


@cli.command()
@click.option(
    "--host",
    type=str,
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the Tollgate server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting Tollgate server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "tollgate.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command("init-db")
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Create all database tables.

    Use this only in development. In production, run `alembic upgrade head`.
    """
    from tollgate.infrastructure.persistence import models  # noqa: F401
    from tollgate.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        db = get_db_manager()
        try:
            await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command("cleanup-tokens")
def cleanup_tokens() -> None:
    """Delete expired blacklist, verification and password reset rows."""
    from tollgate.domain.exceptions import StorageError
    from tollgate.domain.services import TokenCleanupService
    from tollgate.infrastructure.persistence.database import get_db_manager
    from tollgate.infrastructure.persistence.repositories import TokenRepository

    configure_logging(get_settings())

    async def sweep() -> None:
        db = get_db_manager()
        try:
            async with db.session() as session:
                result = await TokenCleanupService(TokenRepository(session)).run_once()
        finally:
            await db.disconnect()
        click.echo(
            f"Removed {result.total} expired tokens "
            f"(blacklisted: {result.blacklisted}, verification: {result.verification}, "
            f"password reset: {result.password_reset})."
        )

    try:
        asyncio.run(sweep())
    except StorageError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1)


@cli.command()
def info() -> None:
    """Display Tollgate configuration."""
    settings = get_settings()

    click.echo(f"""
Tollgate v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}
  App URL:      {settings.app_url}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}

Sessions:
  Token Expire: {settings.session_token_expire_hours} hours
  Verify Email: {settings.email_verification_required}
  Cleanup:      every {settings.token_cleanup_interval_hours} hours

Email:
  SMTP Host:    {settings.smtp_host or '(console)'}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the `tollgate` console script and by `python -m tollgate`.
    """
    cli()


if __name__ == "__main__":
    main()

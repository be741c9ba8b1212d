"""CLI interface for PR Reviewer.

This module provides a command-line interface for managing the reviewer
assignment service: configuration, the API server, status checks and
administrative bulk operations.
"""
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import uvicorn

from .core.config.settings import ReviewerServiceConfig, init_config


def _configure_logging(config: ReviewerServiceConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        filename=config.log_file,
    )


def _open_database(config: ReviewerServiceConfig):
    from .core.storage.database import init_db

    return init_db(config.get_database_url())


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """PR Reviewer - automatic reviewer assignment for pull requests."""
    pass


@cli.command()
@click.option(
    "--config-path",
    "-c",
    type=click.Path(dir_okay=False),
    default="pr-reviewer.yaml",
    help="Path to configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Force overwrite existing config")
def init(config_path: str, force: bool):
    """Initialize PR Reviewer configuration.

    Creates a default configuration file with recommended settings.
    """
    config_file = Path(config_path)

    if config_file.exists() and not force:
        click.echo(f"Configuration file already exists: {config_path}")
        click.echo("Use --force to overwrite")
        return

    try:
        config = ReviewerServiceConfig.create_default_config(config_file)

        click.echo(f"✓ Created configuration file: {config_path}")
        click.echo("\nDefault configuration:")
        click.echo(f"  API Server: {config.api_host}:{config.api_port}")
        click.echo(f"  Database: {config.get_database_url()}")
        click.echo(f"\nEdit {config_path} to customize settings (change admin_token!).")

    except Exception as e:
        click.echo(f"Error creating configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
@click.option("--host", help="Override API host")
@click.option("--port", type=int, help="Override API port")
def start(config: Optional[str], host: Optional[str], port: Optional[int]):
    """Start the PR Reviewer API server."""
    try:
        app_config = init_config(config) if config else init_config()

        if host:
            app_config.api_host = host
        if port:
            app_config.api_port = port

        _configure_logging(app_config)

        click.echo("🚀 Starting PR Reviewer...")
        click.echo(f"   API: http://{app_config.api_host}:{app_config.api_port}")
        click.echo("\nPress Ctrl+C to stop\n")

        uvicorn.run(
            "prreviewer.api:app",
            host=app_config.api_host,
            port=app_config.api_port,
            log_level=app_config.log_level.lower(),
        )

    except KeyboardInterrupt:
        click.echo("\n\nStopping PR Reviewer...")
    except Exception as e:
        click.echo(f"Error starting server: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
def status(config: Optional[str]):
    """Check PR Reviewer system status.

    Displays configuration and database information.
    """
    try:
        app_config = init_config(config) if config else init_config()

        click.echo("PR Reviewer Status")
        click.echo("=" * 50)
        click.echo(f"Configuration: {config or 'default'}")
        click.echo(f"Database URL: {app_config.get_database_url()}")
        click.echo(f"API Server: {app_config.api_host}:{app_config.api_port}")
        click.echo(f"Log Level: {app_config.log_level}")

        db = _open_database(app_config)

        async def get_counts():
            from .core.stats import StatisticsService
            from .core.storage import SqlAlchemyUnitOfWork

            try:
                await db.create_tables()
                return await StatisticsService(SqlAlchemyUnitOfWork(db)).get_statistics()
            finally:
                await db.close()

        stats = asyncio.run(get_counts())
        click.echo("\n✓ Database connection successful")
        click.echo(f"\nTeams: {stats.total_teams}")
        click.echo(f"Users: {stats.total_users} total, {stats.active_users} active")
        click.echo(
            f"Pull requests: {stats.total_prs} total, "
            f"{stats.open_prs} open, {stats.merged_prs} merged"
        )

    except Exception as e:
        click.echo(f"Error checking status: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
@click.option("--limit", "-n", type=int, default=10, help="Number of reviewers to show")
def stats(config: Optional[str], limit: int):
    """Show the reviewers with the most assignments."""
    try:
        app_config = init_config(config) if config else init_config()
        db = _open_database(app_config)

        async def collect():
            from .core.stats import StatisticsService
            from .core.storage import SqlAlchemyUnitOfWork

            try:
                await db.create_tables()
                return await StatisticsService(SqlAlchemyUnitOfWork(db)).get_statistics()
            finally:
                await db.close()

        statistics = asyncio.run(collect())

        if not statistics.assignments_by_user:
            click.echo("No users found")
            return

        ranked = sorted(
            statistics.assignments_by_user.items(), key=lambda item: (-item[1], item[0])
        )[:limit]

        click.echo(f"\nAssignments by reviewer (showing {len(ranked)}):")
        click.echo("=" * 50)
        for username, count in ranked:
            click.echo(f"  {username:<30} {count}")

    except Exception as e:
        click.echo(f"Error retrieving statistics: {e}", err=True)
        sys.exit(1)


@cli.command("deactivate-team")
@click.argument("team_name")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def deactivate_team(team_name: str, config: Optional[str], yes: bool):
    """Deactivate every member of TEAM_NAME and release their open reviews."""
    if not yes:
        click.confirm(f"Deactivate all members of team '{team_name}'?", abort=True)

    try:
        app_config = init_config(config) if config else init_config()
        _configure_logging(app_config)
        db = _open_database(app_config)

        async def run():
            from .core.assignment import AssignmentEngine, seed_shared_random
            from .core.storage import SqlAlchemyUnitOfWork

            if app_config.selection_seed is not None:
                seed_shared_random(app_config.selection_seed)
            try:
                await db.create_tables()
                return await AssignmentEngine(SqlAlchemyUnitOfWork(db)).deactivate_team_members(
                    team_name
                )
            finally:
                await db.close()

        result = asyncio.run(run())

        click.echo(f"✓ Deactivated {result.deactivated_count} members of {team_name}")
        click.echo(f"  Reassigned pull requests: {result.reassigned_count}")
        if result.skipped_pull_requests:
            click.echo(f"  Skipped: {', '.join(result.skipped_pull_requests)}")

    except Exception as e:
        click.echo(f"Error deactivating team: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()

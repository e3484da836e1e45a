#!/usr/bin/env python3
"""
Application Entry Script.

Main entry point for the notecache backend. All functionality is
accessible through command-line options.

Usage:
    python run.py --help
    python run.py --action server --verbose
    python run.py --action config
    python run.py --action init-db
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from notecache.backend.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "config", "init-db"]),
    default="config",
    help="Action to perform.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--host",
    default=None,
    help="Server host (for server action).",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Server port (for server action).",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload (for server action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
) -> None:
    """
    notecache entry point.

    Run the API server, view configuration, or create the notes table.

    Examples:

        # Start development server
        python run.py --action server --reload --verbose

        # View loaded configuration
        python run.py --action config

        # Create database tables
        python run.py --action init-db
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "config":
        show_config(logger)
    elif action == "init-db":
        init_db(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI server with uvicorn."""
    from notecache.backend.core.config import get_app_config

    server = get_app_config().application.server
    server_host = host or server.host
    server_port = port or server.port

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "notecache.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]

    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def show_config(logger) -> None:
    """Display loaded configuration."""
    from notecache.backend.core.config import get_app_config

    try:
        app_config = get_app_config()
    except (FileNotFoundError, ValueError) as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)

    sections = {
        "Application Settings": app_config.application,
        "Database Settings": app_config.database,
        "Logging Settings": app_config.logging,
    }
    for title, section in sections.items():
        click.echo(f"{title} (from YAML):")
        click.echo("-" * 40)
        _echo_mapping(section.model_dump())
        click.echo()

    logger.info("Configuration displayed successfully")


def _echo_mapping(values: dict, indent: int = 2) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_mapping(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def init_db(logger) -> None:
    """Create the database tables."""
    from notecache.backend.core.database import create_tables, dispose_engine

    async def _run() -> None:
        try:
            await create_tables()
        finally:
            await dispose_engine()

    asyncio.run(_run())
    click.echo(click.style("Database tables created.", fg="green"))
    logger.info("Database initialised")


if __name__ == "__main__":
    main()

"""Main CLI entry point for PR Manager.

Usage:
    prmanager serve --port 8080
    prmanager --config prmanager.toml init-db
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from prmanager import __version__
from prmanager.config import PRManagerConfig, load_config
from prmanager.database.connection import create_schema, get_engine
from prmanager.logging import get_logger, setup_logging

app = typer.Typer(
    name="prmanager",
    help="PR Manager: reviewer assignment and pull request lifecycle service",
    no_args_is_help=True,
)

console = Console()
logger = get_logger(__name__)

# Set by the callback before any command runs
_config: PRManagerConfig | None = None


def get_config() -> PRManagerConfig:
    """Return the configuration loaded by the CLI callback.

    Raises:
        RuntimeError: If the callback has not run yet
    """
    if _config is None:
        raise RuntimeError("Configuration not loaded. Invoke through the prmanager CLI.")
    return _config


@app.command()
def serve(
    host: Annotated[
        Optional[str],
        typer.Option("--host", "-h", help="Host to bind to (default: web.host)"),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to bind to (default: web.port)"),
    ] = None,
) -> None:
    """Start the PR Manager HTTP server."""
    import uvicorn

    from prmanager.web.app import create_app

    config = get_config()
    bind_host = host or config.web.host
    bind_port = port or config.web.port

    console.print(f"[bold cyan]Starting {config.app.name} {config.app.version}[/bold cyan]")
    console.print(f"[dim]Host:[/dim] {bind_host}")
    console.print(f"[dim]Port:[/dim] {bind_port}")
    console.print()

    uvicorn.run(
        create_app(config),
        host=bind_host,
        port=bind_port,
        log_level=config.logging.level.lower(),
    )


@app.command("init-db")
def init_db() -> None:
    """Create all tables from the ORM metadata.

    Intended for local setups; production databases are migrated with
    ``alembic upgrade head``.
    """
    config = get_config()

    async def _run() -> None:
        engine = get_engine(config.database)
        try:
            await create_schema(engine)
        finally:
            await engine.dispose()

    try:
        asyncio.run(_run())
    except Exception as e:
        logger.error("init_db_failed", error=str(e))
        console.print(f"[red]Error creating schema:[/red] {e}")
        raise typer.Exit(code=1)

    logger.info("init_db_completed")
    console.print("[green]Database schema created[/green]")


@app.command()
def version() -> None:
    """Print the package version."""
    console.print(__version__)


@app.callback()
def main_callback(
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (TOML format)",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Load configuration and configure logging for every command.

    Args:
        config_path: Optional path to TOML configuration file
        verbose: Enable debug-level logging
    """
    global _config

    try:
        config = load_config(config_path)
    except Exception as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(code=1)

    if verbose:
        config.logging.level = "DEBUG"

    setup_logging(config.logging, service=config.app.name, version=config.app.version)
    _config = config

    if verbose:
        console.print("[dim]Debug logging enabled[/dim]")


if __name__ == "__main__":
    app()

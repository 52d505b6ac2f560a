"""Main entry point for the countrycache application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from typing_extensions import Annotated

from countrycache.core.cache_service import CacheService
from countrycache.core.command_handler import CommandHandler
from countrycache.domain.models.common import CacheConfig
from countrycache.infrastructure.cache.disk_manager import DiskCacheManager
from countrycache.infrastructure.cli.display import ConsoleDisplay
from countrycache.infrastructure.config.settings import DEFAULT_CONFIG_FILE, Settings
from countrycache.infrastructure.monitoring.logger_setup import resolve_log_level, setup_logging

logger = logging.getLogger(__name__)


def create_dependencies(
    config_file: Optional[Path] = DEFAULT_CONFIG_FILE,
    directory: Optional[Path] = None,
    log_level: Optional[str] = None,
) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.
    """
    dependencies: Dict[str, Any] = {}

    # 1. Load Configuration First, then logging based on it
    settings = Settings(config_file=config_file)
    setup_logging(
        log_level=resolve_log_level(log_level or settings.get('logging.level')),
        log_format=settings.get('logging.format'),
        log_file=settings.get('logging.file'),
    )
    logger.info("Configuration and logging initialized.")
    dependencies['settings'] = settings

    # 2. Infrastructure adapters
    cache_config = CacheConfig.from_provider(settings)
    dependencies['cache_config'] = cache_config
    dependencies['ui'] = ConsoleDisplay()
    dependencies['cache_manager'] = DiskCacheManager(cache_config, path=directory)

    # 3. Core services
    dependencies['cache_service'] = CacheService(
        config=cache_config,
        manager=dependencies['cache_manager'],
    )
    dependencies['command_handler'] = CommandHandler(
        cache_service=dependencies['cache_service'],
        ui=dependencies['ui'],
    )
    logger.info("All dependencies initialized successfully.")
    return dependencies


# --- Typer App Definition ---
app = typer.Typer(
    name="countrycache",
    help="countrycache: inspect and manage the file-based key/value cache.",
    add_completion=False,
)


def _handler(ctx: typer.Context) -> CommandHandler:
    return ctx.obj['command_handler']


def _finish(ctx: typer.Context, ok: bool) -> None:
    ctx.obj['cache_manager'].close()
    if not ok:
        raise typer.Exit(code=1)


@app.callback()
def main_callback(
    ctx: typer.Context,
    directory: Annotated[
        Optional[Path],
        typer.Option("--directory", "-d", file_okay=False, help="Cache directory. Overrides the configured one.")
    ] = None,
    config_file: Annotated[
        Path,
        typer.Option("--config-file", "-c", dir_okay=False, help="YAML configuration file.")
    ] = DEFAULT_CONFIG_FILE,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", "-l", help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    ] = None,
):
    """Wires dependencies before any command runs."""
    ctx.obj = create_dependencies(config_file=config_file, directory=directory, log_level=log_level)


@app.command()
def get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key to read.")],
    default: Annotated[Optional[str], typer.Option("--default", help="Value printed when the key is missing.")] = None,
):
    """Print the value stored under KEY."""
    _finish(ctx, _handler(ctx).handle_get(key, default))


@app.command(name="set")
def set_command(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key to write.")],
    value: Annotated[str, typer.Argument(help="Value to store.")],
    ttl: Annotated[Optional[int], typer.Option("--ttl", "-t", min=1, help="Time-to-live in minutes.")] = None,
):
    """Store VALUE under KEY."""
    _finish(ctx, _handler(ctx).handle_set(key, value, ttl))


@app.command()
def delete(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key to delete.")],
):
    """Delete KEY from the cache."""
    _finish(ctx, _handler(ctx).handle_delete(key))


@app.command()
def has(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key to check.")],
):
    """Exit with status 0 if KEY is cached, 1 otherwise."""
    _finish(ctx, _handler(ctx).handle_has(key))


@app.command()
def clear(ctx: typer.Context):
    """Remove every entry from the cache."""
    _finish(ctx, _handler(ctx).handle_clear())


@app.command(name="make-key")
def make_key_command(
    ctx: typer.Context,
    arguments: Annotated[Optional[List[str]], typer.Argument(help="Values to encode into a key.")] = None,
):
    """Print the cache key built from ARGUMENTS."""
    _finish(ctx, _handler(ctx).handle_make_key(arguments or []))


def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()

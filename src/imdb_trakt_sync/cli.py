"""Command-line interface for IMDb-Trakt sync."""

import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click

from .config import Settings, reload_settings, validate_credentials
from .constants import DEFAULT_SYNC_INTERVAL_MINUTES
from .sync_service import execute_sync, print_sync_results

logger = logging.getLogger(__name__)

LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"])


def setup_logging(level: str):
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )


def _show_config_error(invalid_vars: list[str], config_path: Path):
    """Display configuration error message."""
    logger.error("="*60)
    logger.error("❌ CONFIGURATION ERROR: Missing or invalid credentials")
    logger.error("="*60)
    logger.error("Missing/invalid settings:")
    for var in invalid_vars:
        logger.error(f"  - {var}")
    logger.error("")
    logger.error("📋 Required steps:")
    logger.error("  1. Copy the at-main and ubid-main cookies from a logged-in imdb.com session")
    logger.error("  2. Create a Trakt API app: https://trakt.tv/oauth/applications")
    logger.error(f"  3. Edit {config_path} (or set the matching environment variables)")
    logger.error("="*60)


def _load_valid_settings(config_path: Optional[Path]) -> Optional[Settings]:
    """Load settings and return them only if credentials are usable."""
    settings = reload_settings(config_path)
    is_valid, invalid_vars = validate_credentials(settings)
    if not is_valid:
        _show_config_error(invalid_vars, settings.config_path)
        return None
    return settings


@click.group()
@click.version_option(version="0.1.0")
def main():
    """IMDb to Trakt sync service."""
    pass


config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.yaml (default: data/config.yaml)",
)


@main.command()
@click.option(
    "--dry-run",
    is_flag=True,
    help="Simulate sync without making changes",
)
@click.option(
    "--log-level",
    type=LOG_LEVELS,
    default=None,
    help="Logging level (default: from config)",
)
@config_option
def sync(dry_run: bool, log_level: Optional[str], config_path: Optional[Path]):
    """Sync IMDb lists, watchlist and ratings to Trakt."""
    setup_logging(log_level or "INFO")
    settings = _load_valid_settings(config_path)
    if settings is None:
        sys.exit(1)
    if log_level is None:
        setup_logging(settings.log_level)

    try:
        result = execute_sync(dry_run=dry_run, settings=settings)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    print_sync_results(result)
    sys.exit(0)


@main.command()
@click.option(
    "--interval",
    type=int,
    default=DEFAULT_SYNC_INTERVAL_MINUTES,
    help=f"Sync interval in minutes (default: {DEFAULT_SYNC_INTERVAL_MINUTES} = 6 hours)",
)
@click.option(
    "--log-level",
    type=LOG_LEVELS,
    default="INFO",
    help="Logging level",
)
@config_option
def run(interval: int, log_level: str, config_path: Optional[Path]):
    """Run continuous sync at specified interval."""
    setup_logging(log_level)
    interval_seconds = interval * 60

    logger.info("="*60)
    logger.info("Starting IMDb-Trakt Sync Service")
    logger.info(f"Interval: {interval} minutes ({interval//60}h {interval%60}m)")
    logger.info("="*60)

    run_count = 0
    while True:
        # Reload config every run so edits apply without a restart
        settings = _load_valid_settings(config_path)
        if settings is not None:
            run_count += 1
            logger.info(f"Starting sync run #{run_count}...")
            try:
                result = execute_sync(settings=settings)
                print_sync_results(result)
                logger.info(f"Sync run #{run_count} completed successfully")
            except Exception as e:
                logger.error(f"Sync run #{run_count} failed: {e}")
        else:
            logger.error("❌ Configuration invalid. Skipping this run.")

        next_sync_time = time.localtime(time.time() + interval_seconds)
        logger.info(f"Next sync at: {time.strftime('%Y-%m-%d %H:%M:%S %Z', next_sync_time)}")
        try:
            time.sleep(interval_seconds)
        except KeyboardInterrupt:
            logger.info("="*60)
            logger.info("Service stopped by user")
            logger.info(f"Total sync runs: {run_count}")
            logger.info("="*60)
            sys.exit(0)


if __name__ == "__main__":
    main()

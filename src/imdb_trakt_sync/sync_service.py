"""Sync service logic for executing sync operations."""

import logging
from typing import Optional

import click

from .config import Settings, get_settings
from .imdb_client import ImdbClient
from .models import SyncResult
from .sync_engine import SyncEngine
from .trakt_client import TraktClient

logger = logging.getLogger(__name__)


def build_clients(settings: Settings) -> tuple[ImdbClient, TraktClient]:
    """Create the IMDb and Trakt clients from configured credentials."""
    imdb_client = ImdbClient(settings.imdb.cookie_at_main, settings.imdb.cookie_ubid_main)
    trakt_client = TraktClient(settings.trakt.client_id, settings.trakt.access_token)
    return imdb_client, trakt_client


def execute_sync(
    dry_run: bool = False,
    settings: Optional[Settings] = None,
    imdb_client: Optional[ImdbClient] = None,
    trakt_client: Optional[TraktClient] = None,
) -> SyncResult:
    """Execute a sync operation.

    Args:
        dry_run: If True, don't make actual changes on Trakt
        settings: Settings instance (will load if not provided)
        imdb_client: IMDb client (built from settings if not provided)
        trakt_client: Trakt client (built from settings if not provided)

    Returns:
        SyncResult of the completed run. Any API failure aborts the run and
        is re-raised after being logged.
    """
    if settings is None:
        settings = get_settings()

    if imdb_client is None or trakt_client is None:
        logger.info("Initializing API clients...")
        imdb_client, trakt_client = build_clients(settings)

    engine = SyncEngine(
        imdb_client,
        trakt_client,
        list_selection=settings.list_selection,
        dry_run=dry_run or settings.dry_run,
    )
    try:
        return engine.sync()
    except Exception:
        logger.exception("Sync failed with error")
        raise


def print_sync_results(result: SyncResult):
    """Print sync results to console."""
    if result.dry_run:
        click.echo("\n=== DRY RUN - No changes were made ===")

    click.echo("\n=== Sync Results ===")
    click.echo(f"List items added: {result.items_added}")
    click.echo(f"List items removed: {result.items_removed}")
    click.echo(f"Lists created: {result.lists_created}")
    click.echo(f"Lists deleted: {result.lists_deleted}")
    click.echo(f"Ratings added: {result.ratings_added}")
    click.echo(f"Ratings removed: {result.ratings_removed}")
    click.echo(f"History entries added: {result.history_added}")
    click.echo(f"History entries removed: {result.history_removed}")

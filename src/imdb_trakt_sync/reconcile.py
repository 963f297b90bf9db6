"""Set-difference reconciliation between IMDb and Trakt collections."""

import logging
import re
from datetime import timezone
from typing import Iterable

from .constants import DEFAULT_TRAKT_ITEM_TYPE, IMDB_TITLE_TYPES
from .models import Difference, ImdbItem, TraktIds, TraktItem, TraktItemSpec

logger = logging.getLogger(__name__)


def to_trakt_item(item: ImdbItem) -> TraktItem:
    """Build the Trakt representation of an IMDb title.

    Unknown or missing IMDb title types are sent to Trakt as movies. Rated
    titles carry their rating and rating time, which also becomes the
    ``watched_at`` used for history entries.
    """
    item_type = IMDB_TITLE_TYPES.get(item.title_type or "", DEFAULT_TRAKT_ITEM_TYPE)
    spec = TraktItemSpec(ids=TraktIds(imdb=item.id), title=item.title)
    trakt_item = TraktItem(type=item_type.value)

    if item.rating is not None:
        rated_at = item.rated_at.astimezone(timezone.utc) if item.rated_at else None
        spec.rating = item.rating
        spec.rated_at = rated_at
        trakt_item.watched_at = rated_at

    setattr(trakt_item, item_type.value, spec)
    return trakt_item


def trakt_ids(items: Iterable[TraktItem]) -> set[str]:
    """Collect IMDb ids of Trakt items, skipping items of unknown type."""
    return {item.imdb_id for item in items if item.imdb_id is not None}


def compute_difference(source: list[ImdbItem], destination: list[TraktItem]) -> Difference:
    """Compute what Trakt needs added and removed to match IMDb."""
    diff = Difference()

    present = trakt_ids(destination)
    for item in source:
        if item.id not in present:
            diff.add.append(to_trakt_item(item))

    wanted = {item.id for item in source}
    for item in destination:
        imdb_id = item.imdb_id
        if imdb_id is None:
            logger.debug(f"Skipping Trakt item with unrecognized type: {item.type!r}")
            continue
        if imdb_id not in wanted:
            diff.remove.append(item)

    return diff


def format_trakt_list_slug(name: str) -> str:
    """Derive the Trakt list slug Trakt assigns to a list with this name."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
    return slug.strip("-")


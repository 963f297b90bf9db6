"""Core sync engine for IMDb to Trakt synchronization."""

import logging
from typing import Optional

from .base_client import NotFoundError
from .config import ListSelection
from .imdb_client import ImdbClient
from .models import SyncResult, TraktItem
from .pairs import ListPair, NamedListPair, RatingsPair, WatchlistPair
from .trakt_client import TraktClient

logger = logging.getLogger(__name__)


class SyncEngine:
    """Engine converging a Trakt account's lists, watchlist and ratings to IMDb.

    A run is a full recomputation: :meth:`populate_data` gathers current state
    from both services, :meth:`sync_lists` applies list differences and prunes
    Trakt lists with no IMDb counterpart, then :meth:`sync_ratings` applies
    rating differences and keeps the watch history consistent with them.
    """

    def __init__(
        self,
        imdb_client: ImdbClient,
        trakt_client: TraktClient,
        list_selection: ListSelection,
        dry_run: bool = False,
    ):
        """Initialize sync engine with API clients and the lists to sync."""
        self.imdb = imdb_client
        self.trakt = trakt_client
        self.list_selection = list_selection
        self.dry_run = dry_run

        self.trakt_user_id: Optional[str] = None
        self.lists: list[ListPair] = []
        self.ratings = RatingsPair()
        self.result = SyncResult(dry_run=dry_run)

    def sync(self) -> SyncResult:
        """Run one full sync pass."""
        logger.info(f"Starting IMDb -> Trakt sync (dry_run={self.dry_run})")
        self.populate_data()
        self.sync_lists()
        self.sync_ratings()
        logger.info(
            f"Summary: items_added={self.result.items_added}, items_removed={self.result.items_removed}, "
            f"lists_created={self.result.lists_created}, lists_deleted={self.result.lists_deleted}, "
            f"ratings_added={self.result.ratings_added}, ratings_removed={self.result.ratings_removed}, "
            f"history_added={self.result.history_added}, history_removed={self.result.history_removed}"
        )
        return self.result

    def populate_data(self) -> None:
        """Gather IMDb and Trakt state into list pairs and the ratings pair."""
        imdb_user_id = self.imdb.user_id()
        watchlist_id = self.imdb.watchlist_id()
        self.trakt_user_id = self.trakt.user_id()

        if self.list_selection.discover_all:
            list_ids = self.imdb.list_ids(imdb_user_id)
        else:
            list_ids = self.list_selection.list_ids
        self.lists = self._fetch_imdb_lists(list_ids)

        watchlist = self.imdb.list_items(watchlist_id)
        self.lists.append(WatchlistPair(imdb_list_id=watchlist_id, imdb_items=watchlist.items))

        for pair in self.lists:
            try:
                pair.trakt_items = pair.fetch_trakt_items(self.trakt, self.trakt_user_id)
            except NotFoundError:
                if not isinstance(pair, NamedListPair):
                    raise
                self._create_trakt_list(pair)

        self.ratings = RatingsPair(
            imdb_items=self.imdb.ratings(imdb_user_id),
            trakt_items=self.trakt.ratings(),
        )

    def _fetch_imdb_lists(self, list_ids: list[str]) -> list[ListPair]:
        """Fetch IMDb lists, silently dropping ids IMDb does not know."""
        lists: list[ListPair] = []
        for list_id in list_ids:
            try:
                imdb_list = self.imdb.list_items(list_id)
            except NotFoundError:
                logger.warning(f"IMDb list {list_id} not found, skipping")
                continue
            lists.append(
                NamedListPair(
                    imdb_list_id=imdb_list.list_id,
                    name=imdb_list.name,
                    imdb_items=imdb_list.items,
                )
            )
        return lists

    def _create_trakt_list(self, pair: NamedListPair) -> None:
        if self.dry_run:
            logger.info(f"[DRY RUN] Would create Trakt list: {pair.label}")
        else:
            self.trakt.create_list(self.trakt_user_id, pair.name)
        self.result.lists_created += 1

    def sync_lists(self) -> None:
        """Apply per-list differences, then delete Trakt lists missing on IMDb."""
        for pair in self.lists:
            diff = pair.difference()
            if diff.add:
                self._write(f"add {len(diff.add)} item(s) to {pair.label}",
                            pair.add_to, self.trakt, self.trakt_user_id, diff.add)
                self.result.items_added += len(diff.add)
            if diff.remove:
                self._write(f"remove {len(diff.remove)} item(s) from {pair.label}",
                            pair.remove_from, self.trakt, self.trakt_user_id, diff.remove)
                self.result.items_removed += len(diff.remove)

        names = {pair.name for pair in self.lists}
        for trakt_list in self.trakt.lists(self.trakt_user_id):
            if trakt_list.name not in names:
                self._write(f"delete Trakt list {trakt_list.name}",
                            self.trakt.delete_list, self.trakt_user_id, trakt_list.ids.slug)
                self.result.lists_deleted += 1

    def sync_ratings(self) -> None:
        """Apply rating differences and keep watch history consistent with them."""
        diff = self.ratings.difference()
        if diff.add:
            self._write(f"add {len(diff.add)} rating(s)", self.trakt.add_ratings, diff.add)
            self.result.ratings_added += len(diff.add)
            for item in diff.add:
                if self._has_history(item):
                    continue
                self._write(f"add history for {item.imdb_id}", self.trakt.add_history, [item])
                self.result.history_added += 1
        if diff.remove:
            self._write(f"remove {len(diff.remove)} rating(s)", self.trakt.remove_ratings, diff.remove)
            self.result.ratings_removed += len(diff.remove)
            for item in diff.remove:
                if not self._has_history(item):
                    continue
                self._write(f"remove history for {item.imdb_id}", self.trakt.remove_history, [item])
                self.result.history_removed += 1

    def _has_history(self, item: TraktItem) -> bool:
        return len(self.trakt.history(item)) > 0

    def _write(self, description: str, func, *args) -> None:
        """Call a Trakt write unless running dry."""
        if self.dry_run:
            logger.info(f"[DRY RUN] Would {description}")
            return
        logger.debug(f"Trakt write: {description}")
        func(*args)

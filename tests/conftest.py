"""Shared fixtures: in-memory IMDb and Trakt clients."""

from datetime import datetime, timezone

import pytest

from imdb_trakt_sync.base_client import NotFoundError
from imdb_trakt_sync.config import ListSelection
from imdb_trakt_sync.models import ImdbList, TraktItem, TraktList, TraktListIds
from imdb_trakt_sync.reconcile import format_trakt_list_slug
from imdb_trakt_sync.sync_engine import SyncEngine

RATED_AT = datetime(2024, 3, 1, tzinfo=timezone.utc)


def trakt_item(imdb_id: str, item_type: str = "movie") -> TraktItem:
    """Build a Trakt item as the Trakt API would return it."""
    return TraktItem.model_validate(
        {"type": item_type, item_type: {"ids": {"imdb": imdb_id}}}
    )


class FakeImdbClient:
    """IMDb client backed by dictionaries."""

    def __init__(self, lists=None, watchlist=None, ratings=None):
        self.lists = lists or {}
        self.watchlist = watchlist or []
        self.rated = ratings or []

    def user_id(self):
        return "ur1"

    def watchlist_id(self):
        return "ls-watch"

    def list_ids(self, user_id):
        return list(self.lists)

    def list_items(self, list_id):
        if list_id == "ls-watch":
            return ImdbList(list_id=list_id, name="Watchlist", items=self.watchlist)
        if list_id not in self.lists:
            raise NotFoundError(list_id)
        name, items = self.lists[list_id]
        return ImdbList(list_id=list_id, name=name, items=items)

    def ratings(self, user_id):
        return self.rated


class FakeTraktClient:
    """Trakt client that keeps state in memory and records every call."""

    def __init__(self, lists=None, watchlist=None, ratings=None, history=None):
        self.lists_by_slug = lists or {}
        self.watchlist = watchlist or []
        self.rated = ratings or []
        self.history_ids = set(history or [])
        self.calls = []

    def user_id(self):
        return "trakt-user"

    def list_items(self, user_id, list_slug):
        if list_slug not in self.lists_by_slug:
            raise NotFoundError(list_slug)
        return list(self.lists_by_slug[list_slug][1])

    def watchlist_items(self, user_id):
        return list(self.watchlist)

    def lists(self, user_id):
        return [
            TraktList(name=name, ids=TraktListIds(slug=slug))
            for slug, (name, _) in self.lists_by_slug.items()
        ]

    def create_list(self, user_id, name):
        self.calls.append(("create_list", name))
        self.lists_by_slug[format_trakt_list_slug(name)] = (name, [])

    def delete_list(self, user_id, list_slug):
        self.calls.append(("delete_list", list_slug))
        del self.lists_by_slug[list_slug]

    def add_list_items(self, user_id, list_slug, items):
        self.calls.append(("add_list_items", list_slug, [i.imdb_id for i in items]))
        self.lists_by_slug[list_slug][1].extend(items)

    def remove_list_items(self, user_id, list_slug, items):
        self.calls.append(("remove_list_items", list_slug, [i.imdb_id for i in items]))
        gone = {i.imdb_id for i in items}
        name, current = self.lists_by_slug[list_slug]
        self.lists_by_slug[list_slug] = (name, [i for i in current if i.imdb_id not in gone])

    def add_watchlist_items(self, items):
        self.calls.append(("add_watchlist_items", [i.imdb_id for i in items]))
        self.watchlist.extend(items)

    def remove_watchlist_items(self, items):
        self.calls.append(("remove_watchlist_items", [i.imdb_id for i in items]))
        gone = {i.imdb_id for i in items}
        self.watchlist = [i for i in self.watchlist if i.imdb_id not in gone]

    def ratings(self):
        return list(self.rated)

    def add_ratings(self, items):
        self.calls.append(("add_ratings", [i.imdb_id for i in items]))
        self.rated.extend(items)

    def remove_ratings(self, items):
        self.calls.append(("remove_ratings", [i.imdb_id for i in items]))
        gone = {i.imdb_id for i in items}
        self.rated = [i for i in self.rated if i.imdb_id not in gone]

    def history(self, item):
        self.calls.append(("history", item.imdb_id))
        return [{"id": 1}] if item.imdb_id in self.history_ids else []

    def add_history(self, items):
        self.calls.append(("add_history", [i.imdb_id for i in items]))
        self.history_ids.update(i.imdb_id for i in items)

    def remove_history(self, items):
        self.calls.append(("remove_history", [i.imdb_id for i in items]))
        self.history_ids.difference_update(i.imdb_id for i in items)

    def writes(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def make_engine():
    """Build a SyncEngine over fake clients."""
    def _make(imdb, trakt, selection=None, dry_run=False):
        return SyncEngine(imdb, trakt, list_selection=selection or ListSelection(), dry_run=dry_run)
    return _make

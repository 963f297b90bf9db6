"""Tests for the sync engine against in-memory clients."""

import pytest
import requests
from conftest import RATED_AT, FakeImdbClient, FakeTraktClient, trakt_item

from imdb_trakt_sync.base_client import NotFoundError
from imdb_trakt_sync.config import ListSelection
from imdb_trakt_sync.models import ImdbItem
from imdb_trakt_sync.pairs import NamedListPair, WatchlistPair


class TestPopulateData:
    """Test gathering IMDb and Trakt state."""

    def test_discovers_all_lists_and_appends_watchlist(self, make_engine):
        imdb = FakeImdbClient(
            lists={"ls1": ("Favourites", [ImdbItem(id="tt1")]), "ls2": ("Later", [])},
            watchlist=[ImdbItem(id="tt5")],
        )
        trakt = FakeTraktClient(lists={"favourites": ("Favourites", []), "later": ("Later", [])})
        engine = make_engine(imdb, trakt)

        engine.populate_data()

        assert [type(p) for p in engine.lists] == [NamedListPair, NamedListPair, WatchlistPair]
        assert [p.name for p in engine.lists[:2]] == ["Favourites", "Later"]
        assert engine.lists[-1].imdb_items[0].id == "tt5"
        assert engine.trakt_user_id == "trakt-user"

    def test_unknown_list_ids_are_dropped(self, make_engine):
        imdb = FakeImdbClient(lists={"ls1": ("Favourites", [])})
        trakt = FakeTraktClient(lists={"favourites": ("Favourites", [])})
        selection = ListSelection.parse("ls1,ls404")
        engine = make_engine(imdb, trakt, selection=selection)

        engine.populate_data()

        named = [p for p in engine.lists if isinstance(p, NamedListPair)]
        assert [p.imdb_list_id for p in named] == ["ls1"]

    def test_missing_trakt_list_is_created(self, make_engine):
        imdb = FakeImdbClient(lists={"ls1": ("My Picks", [ImdbItem(id="tt1")])})
        trakt = FakeTraktClient()
        engine = make_engine(imdb, trakt)

        engine.populate_data()

        assert trakt.writes("create_list") == [("create_list", "My Picks")]
        assert engine.lists[0].trakt_items == []
        assert engine.result.lists_created == 1

    def test_other_trakt_errors_propagate(self, make_engine):
        imdb = FakeImdbClient(lists={"ls1": ("Favourites", [])})
        trakt = FakeTraktClient()

        def boom(user_id, list_slug):
            raise requests.HTTPError("500 Server Error")

        trakt.list_items = boom
        engine = make_engine(imdb, trakt)

        with pytest.raises(requests.HTTPError):
            engine.populate_data()

    def test_missing_trakt_watchlist_is_not_created(self, make_engine):
        """Test a 404 on the watchlist aborts instead of creating a list."""
        imdb = FakeImdbClient(watchlist=[ImdbItem(id="tt1")])
        trakt = FakeTraktClient()

        def missing(user_id):
            raise NotFoundError("watchlist")

        trakt.watchlist_items = missing
        engine = make_engine(imdb, trakt)

        with pytest.raises(NotFoundError):
            engine.populate_data()
        assert trakt.writes("create_list") == []


class TestSyncLists:
    """Test the list phase."""

    def test_end_to_end_list_sync_converges(self, make_engine):
        imdb = FakeImdbClient(lists={"ls1": ("L", [ImdbItem(id="tt1", title_type="movie")])})
        trakt = FakeTraktClient(lists={"l": ("L", [])})

        engine = make_engine(imdb, trakt)
        engine.populate_data()
        diff = engine.lists[0].difference()
        assert [(i.type, i.imdb_id) for i in diff.add] == [("movie", "tt1")]
        assert diff.remove == []
        engine.sync_lists()

        assert trakt.writes("add_list_items") == [("add_list_items", "l", ["tt1"])]

        second = make_engine(imdb, trakt)
        second.populate_data()
        assert second.lists[0].difference().is_empty

    def test_watchlist_uses_watchlist_calls(self, make_engine):
        imdb = FakeImdbClient(watchlist=[ImdbItem(id="tt1")])
        trakt = FakeTraktClient(watchlist=[trakt_item("tt2")])
        engine = make_engine(imdb, trakt)

        engine.populate_data()
        engine.sync_lists()

        assert trakt.writes("add_watchlist_items") == [("add_watchlist_items", ["tt1"])]
        assert trakt.writes("remove_watchlist_items") == [("remove_watchlist_items", ["tt2"])]
        assert trakt.writes("add_list_items") == []
        assert trakt.writes("remove_list_items") == []

    def test_add_happens_before_remove_per_list(self, make_engine):
        imdb = FakeImdbClient(lists={"ls1": ("A", [ImdbItem(id="tt1")])})
        trakt = FakeTraktClient(lists={"a": ("A", [trakt_item("tt2")])})
        engine = make_engine(imdb, trakt)

        engine.populate_data()
        engine.sync_lists()

        writes = [c[0] for c in trakt.calls if c[0].endswith("_items")]
        assert writes == ["add_list_items", "remove_list_items"]
        assert engine.result.items_added == 1
        assert engine.result.items_removed == 1

    def test_orphan_trakt_lists_are_deleted(self, make_engine):
        imdb = FakeImdbClient(lists={"ls1": ("Keep", [])})
        trakt = FakeTraktClient(lists={"keep": ("Keep", []), "foo": ("Foo", [])})
        engine = make_engine(imdb, trakt)

        engine.populate_data()
        engine.sync_lists()

        assert trakt.writes("delete_list") == [("delete_list", "foo")]
        assert "keep" in trakt.lists_by_slug
        assert engine.result.lists_deleted == 1

    def test_trakt_list_named_watchlist_is_kept(self, make_engine):
        imdb = FakeImdbClient(watchlist=[ImdbItem(id="tt1")])
        trakt = FakeTraktClient(lists={"watchlist": ("watchlist", [])})
        engine = make_engine(imdb, trakt)

        engine.populate_data()
        engine.sync_lists()

        assert trakt.writes("delete_list") == []
        assert "watchlist" in trakt.lists_by_slug
        assert engine.lists[-1].name == "watchlist"


class TestSyncRatings:
    """Test the ratings phase and its history gating."""

    def test_rating_added_with_history_when_missing(self, make_engine):
        imdb = FakeImdbClient(ratings=[ImdbItem(id="tt2", title_type="movie", rating=8, rated_at=RATED_AT)])
        trakt = FakeTraktClient()
        engine = make_engine(imdb, trakt)

        engine.populate_data()
        engine.sync_ratings()

        assert trakt.writes("add_ratings") == [("add_ratings", ["tt2"])]
        assert trakt.rated[0].movie.rating == 8
        assert trakt.writes("add_history") == [("add_history", ["tt2"])]
        assert engine.result.history_added == 1

    def test_existing_history_is_not_duplicated(self, make_engine):
        imdb = FakeImdbClient(ratings=[ImdbItem(id="tt2", title_type="movie", rating=8, rated_at=RATED_AT)])
        trakt = FakeTraktClient(history=["tt2"])
        engine = make_engine(imdb, trakt)

        engine.populate_data()
        engine.sync_ratings()

        assert trakt.writes("add_ratings") == [("add_ratings", ["tt2"])]
        assert trakt.writes("add_history") == []

    def test_removed_rating_removes_existing_history_only(self, make_engine):
        imdb = FakeImdbClient()
        trakt = FakeTraktClient(ratings=[trakt_item("tt3"), trakt_item("tt4")], history=["tt3"])
        engine = make_engine(imdb, trakt)

        engine.populate_data()
        engine.sync_ratings()

        assert trakt.writes("remove_ratings") == [("remove_ratings", ["tt3", "tt4"])]
        assert trakt.writes("remove_history") == [("remove_history", ["tt3"])]
        assert engine.result.history_removed == 1

    def test_batch_rating_write_precedes_history_checks(self, make_engine):
        imdb = FakeImdbClient(ratings=[ImdbItem(id="tt1", rating=7, rated_at=RATED_AT)])
        trakt = FakeTraktClient()
        engine = make_engine(imdb, trakt)

        engine.populate_data()
        engine.sync_ratings()

        names = [c[0] for c in trakt.calls]
        assert names == ["add_ratings", "history", "add_history"]


def test_full_sync_runs_lists_before_ratings(make_engine):
    imdb = FakeImdbClient(
        lists={"ls1": ("A", [ImdbItem(id="tt1")])},
        ratings=[ImdbItem(id="tt9", rating=6, rated_at=RATED_AT)],
    )
    trakt = FakeTraktClient(lists={"a": ("A", []), "gone": ("Gone", [])})
    engine = make_engine(imdb, trakt)

    result = engine.sync()

    names = [c[0] for c in trakt.calls]
    assert names.index("delete_list") < names.index("add_ratings")
    assert result.items_added == 1
    assert result.ratings_added == 1


def test_dry_run_makes_no_writes(make_engine):
    imdb = FakeImdbClient(
        lists={"ls1": ("New", [ImdbItem(id="tt1")])},
        watchlist=[ImdbItem(id="tt2")],
        ratings=[ImdbItem(id="tt3", rating=5, rated_at=RATED_AT)],
    )
    trakt = FakeTraktClient(lists={"old": ("Old", [])})
    engine = make_engine(imdb, trakt, dry_run=True)

    result = engine.sync()

    assert [c for c in trakt.calls if c[0] != "history"] == []
    assert result.dry_run
    assert result.lists_created == 1
    assert result.lists_deleted == 1
    assert result.items_added == 2
    assert result.ratings_added == 1

"""IMDb/Trakt collection pairs that reconciliation operates on."""

from typing import Optional

from pydantic import BaseModel, Field

from .constants import WATCHLIST_NAME
from .models import Difference, ImdbItem, TraktItem
from .reconcile import compute_difference, format_trakt_list_slug
from .trakt_client import TraktClient


class CollectionPair(BaseModel):
    """IMDb membership joined with Trakt membership of the same collection."""

    imdb_items: list[ImdbItem] = Field(default_factory=list)
    trakt_items: list[TraktItem] = Field(default_factory=list)

    def difference(self) -> Difference:
        return compute_difference(self.imdb_items, self.trakt_items)


class RatingsPair(CollectionPair):
    """IMDb ratings vs. Trakt ratings."""


class ListPair(CollectionPair):
    """A list synced to Trakt; subclasses decide which Trakt calls apply."""

    imdb_list_id: str
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or self.imdb_list_id

    def fetch_trakt_items(self, trakt: TraktClient, user_id: str) -> list[TraktItem]:
        raise NotImplementedError

    def add_to(self, trakt: TraktClient, user_id: str, items: list[TraktItem]) -> None:
        raise NotImplementedError

    def remove_from(self, trakt: TraktClient, user_id: str, items: list[TraktItem]) -> None:
        raise NotImplementedError


class NamedListPair(ListPair):
    """A user-created IMDb list mirrored to a Trakt list of the same name."""

    name: str

    @property
    def trakt_list_slug(self) -> str:
        return format_trakt_list_slug(self.name)

    def fetch_trakt_items(self, trakt: TraktClient, user_id: str) -> list[TraktItem]:
        return trakt.list_items(user_id, self.trakt_list_slug)

    def add_to(self, trakt: TraktClient, user_id: str, items: list[TraktItem]) -> None:
        trakt.add_list_items(user_id, self.trakt_list_slug, items)

    def remove_from(self, trakt: TraktClient, user_id: str, items: list[TraktItem]) -> None:
        trakt.remove_list_items(user_id, self.trakt_list_slug, items)


class WatchlistPair(ListPair):
    """The IMDb watchlist mirrored to the Trakt watchlist."""

    name: str = WATCHLIST_NAME

    def fetch_trakt_items(self, trakt: TraktClient, user_id: str) -> list[TraktItem]:
        return trakt.watchlist_items(user_id)

    def add_to(self, trakt: TraktClient, user_id: str, items: list[TraktItem]) -> None:
        trakt.add_watchlist_items(items)

    def remove_from(self, trakt: TraktClient, user_id: str, items: list[TraktItem]) -> None:
        trakt.remove_watchlist_items(items)

"""Trakt API client."""

import logging
from typing import Any, Optional

from .base_client import BaseAPIClient
from .constants import TRAKT_API_VERSION, TraktItemType
from .models import TraktItem, TraktList

logger = logging.getLogger(__name__)


def build_items_payload(items: list[TraktItem], with_watched_at: bool = False) -> dict[str, list[dict]]:
    """Group items into the ``movies``/``shows``/``episodes`` body Trakt expects."""
    payload: dict[str, list[dict]] = {}
    for item in items:
        spec = item.spec
        if spec is None:
            logger.warning(f"Not sending Trakt item without a {item.type!r} object")
            continue
        entry = spec.model_dump(mode="json", exclude_none=True)
        if with_watched_at and item.watched_at is not None:
            entry["watched_at"] = item.model_dump(mode="json")["watched_at"]
        payload.setdefault(f"{item.type}s", []).append(entry)
    return payload


class TraktClient(BaseAPIClient):
    """Client for the Trakt REST API v2."""

    BASE_URL = "https://api.trakt.tv"
    service_name = "Trakt"

    def __init__(self, client_id: str, access_token: str):
        """Initialize Trakt client with app id and user access token."""
        super().__init__(
            base_url=self.BASE_URL,
            headers={
                "Content-Type": "application/json",
                "trakt-api-version": TRAKT_API_VERSION,
                "trakt-api-key": client_id,
                "Authorization": f"Bearer {access_token}",
            },
        )

    def _get(self, path: str, params: Optional[dict] = None) -> Any:
        response = self._check(self.session.get(self._url(path), params=params))
        return response.json()

    def _post(self, path: str, body: dict) -> Any:
        response = self._check(self.session.post(self._url(path), json=body))
        if not response.content:
            return None
        return response.json()

    def _delete(self, path: str) -> None:
        self._check(self.session.delete(self._url(path)))

    def user_id(self) -> str:
        """Return the slug of the authenticated user."""
        data = self._get("/users/settings")
        return data["user"]["ids"]["slug"]

    def list_items(self, user_id: str, list_slug: str) -> list[TraktItem]:
        """Fetch a user list's items; raises NotFoundError if the list is missing."""
        data = self._get(f"/users/{user_id}/lists/{list_slug}/items")
        return [TraktItem.model_validate(item) for item in data]

    def watchlist_items(self, user_id: str) -> list[TraktItem]:
        data = self._get(f"/users/{user_id}/watchlist")
        return [TraktItem.model_validate(item) for item in data]

    def lists(self, user_id: str) -> list[TraktList]:
        data = self._get(f"/users/{user_id}/lists")
        return [TraktList.model_validate(item) for item in data]

    def create_list(self, user_id: str, name: str) -> None:
        self._post(f"/users/{user_id}/lists", {"name": name, "privacy": "private"})
        logger.info(f"Created Trakt list: {name}")

    def delete_list(self, user_id: str, list_slug: str) -> None:
        self._delete(f"/users/{user_id}/lists/{list_slug}")
        logger.info(f"Deleted Trakt list: {list_slug}")

    def add_list_items(self, user_id: str, list_slug: str, items: list[TraktItem]) -> None:
        self._post(f"/users/{user_id}/lists/{list_slug}/items", build_items_payload(items))
        logger.info(f"Added {len(items)} item(s) to Trakt list {list_slug}")

    def remove_list_items(self, user_id: str, list_slug: str, items: list[TraktItem]) -> None:
        self._post(f"/users/{user_id}/lists/{list_slug}/items/remove", build_items_payload(items))
        logger.info(f"Removed {len(items)} item(s) from Trakt list {list_slug}")

    def add_watchlist_items(self, items: list[TraktItem]) -> None:
        self._post("/sync/watchlist", build_items_payload(items))
        logger.info(f"Added {len(items)} item(s) to Trakt watchlist")

    def remove_watchlist_items(self, items: list[TraktItem]) -> None:
        self._post("/sync/watchlist/remove", build_items_payload(items))
        logger.info(f"Removed {len(items)} item(s) from Trakt watchlist")

    def ratings(self) -> list[TraktItem]:
        data = self._get("/sync/ratings")
        return [TraktItem.model_validate(item) for item in data]

    def add_ratings(self, items: list[TraktItem]) -> None:
        self._post("/sync/ratings", build_items_payload(items))
        logger.info(f"Added {len(items)} Trakt rating(s)")

    def remove_ratings(self, items: list[TraktItem]) -> None:
        self._post("/sync/ratings/remove", build_items_payload(items))
        logger.info(f"Removed {len(items)} Trakt rating(s)")

    def history(self, item: TraktItem) -> list[dict]:
        """Fetch the watch history entries Trakt holds for a single item."""
        item_type = TraktItemType(item.type)
        return self._get(f"/sync/history/{item_type.value}s/{item.imdb_id}")

    def add_history(self, items: list[TraktItem]) -> None:
        self._post("/sync/history", build_items_payload(items, with_watched_at=True))

    def remove_history(self, items: list[TraktItem]) -> None:
        self._post("/sync/history/remove", build_items_payload(items))

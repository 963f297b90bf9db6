"""IMDb client (read-only, cookie authenticated)."""

import csv
import html
import io
import logging
import re
from datetime import datetime, timezone
from typing import Optional

from .base_client import BaseAPIClient
from .models import ImdbItem, ImdbList

logger = logging.getLogger(__name__)

USER_ID_PATTERN = re.compile(r"/user/(ur\d+)")
LIST_ID_PATTERN = re.compile(r"/list/(ls\d+)")
LIST_NAME_PATTERN = re.compile(r'<meta property="og:title" content="([^"]*)"')


def parse_rating_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an IMDb export date (``YYYY-MM-DD``) as midnight UTC."""
    if not value:
        return None
    return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)


def parse_export(text: str) -> list[ImdbItem]:
    """Parse an IMDb list or ratings CSV export."""
    items = []
    for row in csv.DictReader(io.StringIO(text)):
        imdb_id = (row.get("Const") or "").strip()
        if not imdb_id:
            continue
        rating = row.get("Your Rating") or None
        items.append(
            ImdbItem(
                id=imdb_id,
                title=row.get("Title") or None,
                title_type=row.get("Title Type") or None,
                rating=int(rating) if rating else None,
                rated_at=parse_rating_date(row.get("Date Rated")) if rating else None,
            )
        )
    return items


class ImdbClient(BaseAPIClient):
    """Client scraping a user's lists, watchlist and ratings from IMDb."""

    BASE_URL = "https://www.imdb.com"
    service_name = "IMDb"

    def __init__(self, cookie_at_main: str, cookie_ubid_main: str):
        """Initialize IMDb client with the session cookies of a logged-in browser."""
        super().__init__(
            base_url=self.BASE_URL,
            headers={"User-Agent": "Mozilla/5.0 (X11; Linux x86_64)"},
            cookies={"at-main": cookie_at_main, "ubid-main": cookie_ubid_main},
        )

    def _get_text(self, path: str) -> str:
        response = self._check(self.session.get(self._url(path)))
        return response.text

    def user_id(self) -> str:
        """Resolve the logged-in user's id from the profile redirect."""
        response = self._check(self.session.get(self._url("/profile")))
        match = USER_ID_PATTERN.search(response.url) or USER_ID_PATTERN.search(response.text)
        if match is None:
            raise ValueError("Could not determine IMDb user id; check the IMDb cookies")
        return match.group(1)

    def watchlist_id(self) -> str:
        match = LIST_ID_PATTERN.search(self._get_text("/watchlist"))
        if match is None:
            raise ValueError("Could not determine IMDb watchlist id")
        return match.group(1)

    def list_ids(self, user_id: str) -> list[str]:
        """Return ids of every list the user owns, in page order."""
        page = self._get_text(f"/user/{user_id}/lists")
        return list(dict.fromkeys(LIST_ID_PATTERN.findall(page)))

    def list_items(self, list_id: str) -> ImdbList:
        """Fetch a list's name and items; raises NotFoundError for unknown lists."""
        page = self._get_text(f"/list/{list_id}/")
        match = LIST_NAME_PATTERN.search(page)
        name = html.unescape(match.group(1)).strip() if match else list_id
        items = parse_export(self._get_text(f"/list/{list_id}/export"))
        logger.info(f"Fetched {len(items)} items from IMDb list {name}")
        return ImdbList(list_id=list_id, name=name, items=items)

    def ratings(self, user_id: str) -> list[ImdbItem]:
        items = parse_export(self._get_text(f"/user/{user_id}/ratings/export"))
        logger.info(f"Fetched {len(items)} ratings from IMDb")
        return items

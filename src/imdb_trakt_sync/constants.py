"""Constants used throughout the application."""

from enum import Enum


class TraktItemType(str, Enum):
    """Item categories Trakt understands."""

    MOVIE = "movie"
    SHOW = "show"
    EPISODE = "episode"


# IMDb "Title Type" -> Trakt item type; anything missing falls back to movie
IMDB_TITLE_TYPES = {
    "movie": TraktItemType.MOVIE,
    "tvSeries": TraktItemType.SHOW,
    "tvMiniSeries": TraktItemType.SHOW,
    "tvEpisode": TraktItemType.EPISODE,
}
DEFAULT_TRAKT_ITEM_TYPE = TraktItemType.MOVIE

# Sentinel for "sync every list the IMDb user owns"
ALL_LISTS = "all"

# Name the watchlist pair carries; a Trakt list with this name is never pruned
WATCHLIST_NAME = "watchlist"

# HTTP Status Codes
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_TOO_MANY_REQUESTS = 429

# Default values
DEFAULT_SYNC_INTERVAL_MINUTES = 360  # 6 hours
TRAKT_API_VERSION = "2"

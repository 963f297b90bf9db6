"""Data models for IMDb and Trakt items."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import TraktItemType


class ImdbItem(BaseModel):
    """A title as listed or rated on IMDb."""

    id: str
    title: Optional[str] = None
    title_type: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=10)
    rated_at: Optional[datetime] = None


class ImdbList(BaseModel):
    """An IMDb list with its display name and contents."""

    list_id: str
    name: str
    items: list[ImdbItem] = Field(default_factory=list)


class TraktIds(BaseModel):
    """Identifiers Trakt attaches to movies, shows and episodes."""

    model_config = ConfigDict(extra="ignore")

    imdb: Optional[str] = None
    trakt: Optional[int] = None
    slug: Optional[str] = None
    tmdb: Optional[int] = None
    tvdb: Optional[int] = None


class TraktItemSpec(BaseModel):
    """The movie/show/episode object nested inside a Trakt item."""

    model_config = ConfigDict(extra="ignore")

    ids: TraktIds = Field(default_factory=TraktIds)
    title: Optional[str] = None
    rating: Optional[int] = None
    rated_at: Optional[datetime] = None


class TraktItem(BaseModel):
    """A list, watchlist or ratings entry on Trakt."""

    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    movie: Optional[TraktItemSpec] = None
    show: Optional[TraktItemSpec] = None
    episode: Optional[TraktItemSpec] = None
    rating: Optional[int] = None
    rated_at: Optional[datetime] = None
    watched_at: Optional[datetime] = None

    @property
    def has_known_type(self) -> bool:
        return self.type in {t.value for t in TraktItemType}

    @property
    def spec(self) -> Optional[TraktItemSpec]:
        """Return the nested object matching ``type``, or None if there is none."""
        if not self.has_known_type:
            return None
        return getattr(self, self.type)

    @property
    def imdb_id(self) -> Optional[str]:
        """IMDb id of the nested object.

        None for unknown types; an empty string when a known type carries no
        IMDb id, so such items still take part in set membership.
        """
        if not self.has_known_type:
            return None
        spec = self.spec
        if spec is None:
            return ""
        return spec.ids.imdb or ""


class TraktListIds(BaseModel):
    """Identifiers of a Trakt list."""

    model_config = ConfigDict(extra="ignore")

    trakt: Optional[int] = None
    slug: str


class TraktList(BaseModel):
    """A list owned by the Trakt user."""

    model_config = ConfigDict(extra="ignore")

    name: str
    ids: TraktListIds


class Difference(BaseModel):
    """Changes needed to converge a Trakt collection towards IMDb."""

    add: list[TraktItem] = Field(default_factory=list)
    remove: list[TraktItem] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.add and not self.remove


class SyncResult(BaseModel):
    """Result of a sync operation."""

    items_added: int = 0
    items_removed: int = 0
    lists_created: int = 0
    lists_deleted: int = 0
    ratings_added: int = 0
    ratings_removed: int = 0
    history_added: int = 0
    history_removed: int = 0
    dry_run: bool = False

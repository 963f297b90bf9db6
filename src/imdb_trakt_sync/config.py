"""Configuration management using Pydantic models."""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from .constants import ALL_LISTS

logger = logging.getLogger(__name__)


# Placeholder values that indicate unconfigured credentials
INVALID_PLACEHOLDERS = {
    "YOUR_IMDB_AT_MAIN_COOKIE_HERE",
    "YOUR_IMDB_UBID_MAIN_COOKIE_HERE",
    "YOUR_TRAKT_CLIENT_ID_HERE",
    "YOUR_TRAKT_ACCESS_TOKEN_HERE",
    "",
}

# Environment variables overriding config.yaml values
ENV_OVERRIDES = {
    "IMDB_COOKIE_AT_MAIN": ("imdb", "cookie_at_main"),
    "IMDB_COOKIE_UBID_MAIN": ("imdb", "cookie_ubid_main"),
    "IMDB_LIST_IDS": ("imdb", "list_ids"),
    "TRAKT_CLIENT_ID": ("trakt", "client_id"),
    "TRAKT_ACCESS_TOKEN": ("trakt", "access_token"),
}


class ListSelection(BaseModel):
    """Which IMDb lists to sync: every owned list, or an explicit allow-list."""
    discover_all: bool = True
    list_ids: list[str] = Field(default_factory=list)

    @classmethod
    def parse(cls, value: Union[str, list, None]) -> "ListSelection":
        """Parse ``all`` or a comma-separated string (or list) of IMDb list ids."""
        if value is None:
            return cls()
        if isinstance(value, str):
            if value.strip().lower() == ALL_LISTS:
                return cls()
            value = value.split(",")
        list_ids = [str(v).strip() for v in value if str(v).strip()]
        return cls(discover_all=False, list_ids=list_ids)


class ImdbConfig(BaseModel):
    """IMDb session configuration."""
    cookie_at_main: Optional[str] = None
    cookie_ubid_main: Optional[str] = None
    list_ids: ListSelection = Field(default_factory=ListSelection)

    @field_validator("list_ids", mode="before")
    @classmethod
    def parse_list_ids(cls, v):
        """Accept the ``all`` sentinel or comma-separated ids."""
        if isinstance(v, (ListSelection, dict)):
            return v
        return ListSelection.parse(v)


class TraktConfig(BaseModel):
    """Trakt API configuration."""
    client_id: Optional[str] = None
    access_token: Optional[str] = None


class SyncConfig(BaseModel):
    """Synchronization settings."""
    dry_run: bool = False
    log_level: str = "INFO"


class Config(BaseModel):
    """Root configuration model."""
    imdb: ImdbConfig = Field(default_factory=ImdbConfig)
    trakt: TraktConfig = Field(default_factory=TraktConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)


def default_config_path() -> Path:
    """Get config file path based on environment."""
    if os.path.exists("/.dockerenv"):
        return Path("/app/data/config.yaml")
    return Path("data/config.yaml")


class Settings:
    """Application settings loaded from config.yaml and the environment."""

    def __init__(self, config_path: Optional[Path] = None):
        """Load and validate configuration."""
        self.config_path = Path(config_path) if config_path else default_config_path()

        if not self.config_path.exists():
            self._create_config_template()

        self.config = self._load_config()

    def _create_config_template(self) -> None:
        """Create config template from example."""
        example_path = Path("config.example.yaml")
        if example_path.exists():
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy(example_path, self.config_path)
            logger.info(f"✅ Created config template: {self.config_path}")
            logger.info("📝 Please edit the config file with your credentials")

    def _load_config(self) -> Config:
        """Load configuration from YAML, apply env overrides, validate."""
        raw_config = {}
        if self.config_path.exists():
            with open(self.config_path, "r", encoding="utf-8") as f:
                raw_config = yaml.safe_load(f) or {}

        for env_var, (section, key) in ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value:
                raw_config.setdefault(section, {})[key] = value

        try:
            config = Config(**raw_config)
        except Exception as e:
            logger.error(f"❌ Failed to load config: {e}")
            raise

        logger.info(f"✅ Loaded configuration from {self.config_path}")
        return config

    @property
    def imdb(self) -> ImdbConfig:
        return self.config.imdb

    @property
    def trakt(self) -> TraktConfig:
        return self.config.trakt

    @property
    def list_selection(self) -> ListSelection:
        return self.config.imdb.list_ids

    @property
    def dry_run(self) -> bool:
        return self.config.sync.dry_run

    @property
    def log_level(self) -> str:
        return self.config.sync.log_level


def validate_credentials(settings: Settings) -> tuple[bool, list[str]]:
    """
    Validate that credentials are not placeholder values.
    Returns (is_valid, list_of_invalid_settings).
    """
    required = {
        "imdb.cookie_at_main": settings.imdb.cookie_at_main,
        "imdb.cookie_ubid_main": settings.imdb.cookie_ubid_main,
        "trakt.client_id": settings.trakt.client_id,
        "trakt.access_token": settings.trakt.access_token,
    }
    missing_or_invalid = [
        name for name, value in required.items()
        if not value or value in INVALID_PLACEHOLDERS
    ]
    return len(missing_or_invalid) == 0, missing_or_invalid


# Singleton cache for settings
_SETTINGS_SINGLETON = None

def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Get (cached) application settings singleton."""
    global _SETTINGS_SINGLETON
    if _SETTINGS_SINGLETON is None:
        _SETTINGS_SINGLETON = Settings(config_path)
    return _SETTINGS_SINGLETON

def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload of application settings singleton."""
    global _SETTINGS_SINGLETON
    _SETTINGS_SINGLETON = Settings(config_path)
    return _SETTINGS_SINGLETON

"""Connection and refresh configuration."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from groupwatch.state_store import KeyValueStore

logger = logging.getLogger("groupwatch.config")

DEFAULT_API_URL = "https://gitlab.com"
DEFAULT_REFRESH_INTERVAL = 30
CONFIG_KEY = "gitlab_config"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass
class GitLabConfig:
    """Connection settings for a GitLab instance and the root group to watch."""

    api_url: str = DEFAULT_API_URL
    private_token: str = ""
    root_group_id: str = ""

    @classmethod
    def from_env(cls) -> GitLabConfig:
        """Read GITLAB_API_URL, GITLAB_TOKEN and GITLAB_ROOT_GROUP_ID.

        Unset variables leave the field empty so that saved settings can fill it.
        """
        return cls(
            api_url=os.environ.get("GITLAB_API_URL", ""),
            private_token=os.environ.get("GITLAB_TOKEN", ""),
            root_group_id=os.environ.get("GITLAB_ROOT_GROUP_ID", ""),
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.api_url and self.private_token and self.root_group_id)

    @property
    def root_group_id_int(self) -> int:
        try:
            return int(self.root_group_id)
        except ValueError as e:
            raise ConfigError(f"Root group ID must be numeric, got {self.root_group_id!r}") from e

    def validate(self) -> None:
        """Check that every field is set and the group ID is numeric.

        Raises:
            ConfigError: Listing the missing or invalid fields.
        """
        required = {
            "api_url": self.api_url,
            "private_token": self.private_token,
            "root_group_id": self.root_group_id,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigError(f"Missing required fields: {', '.join(missing)}")
        if not self.api_url.startswith(("http://", "https://")):
            raise ConfigError(f"API URL must start with http:// or https://, got {self.api_url!r}")
        self.root_group_id_int  # noqa: B018 - raises ConfigError if not numeric


@dataclass
class RefreshSettings:
    """Auto-refresh settings for pipeline statuses."""

    auto_refresh: bool = False
    interval_seconds: int = DEFAULT_REFRESH_INTERVAL

    @classmethod
    def from_env(cls) -> RefreshSettings:
        """Read GROUPWATCH_AUTO_REFRESH and GROUPWATCH_REFRESH_INTERVAL."""
        raw_interval = os.environ.get("GROUPWATCH_REFRESH_INTERVAL", str(DEFAULT_REFRESH_INTERVAL))
        try:
            interval = int(raw_interval)
        except ValueError as e:
            raise ConfigError(f"Invalid refresh interval {raw_interval!r}") from e
        if interval <= 0:
            raise ConfigError(f"Refresh interval must be positive, got {interval}")
        auto = os.environ.get("GROUPWATCH_AUTO_REFRESH", "false").lower() in ("1", "true", "yes")
        return cls(auto_refresh=auto, interval_seconds=interval)


class ConfigStore:
    """Persists the connection settings, except the token.

    The access token is kept in memory only.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def save(self, config: GitLabConfig) -> None:
        data = {"api_url": config.api_url, "root_group_id": config.root_group_id}
        self._store.set(CONFIG_KEY, json.dumps(data))
        logger.info("Saved configuration for %s (group %s)", config.api_url, config.root_group_id)

    def load(self) -> GitLabConfig | None:
        """Load the saved settings.

        Returns:
            A GitLabConfig with an empty token, or None if nothing was saved
        """
        raw = self._store.get(CONFIG_KEY)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable saved configuration")
            return None
        return GitLabConfig(
            api_url=data.get("api_url") or DEFAULT_API_URL,
            root_group_id=data.get("root_group_id") or "",
        )

    def merge_with(self, config: GitLabConfig) -> GitLabConfig:
        """Fill empty fields of ``config`` from the saved settings."""
        saved = self.load() or GitLabConfig()
        return GitLabConfig(
            api_url=config.api_url or saved.api_url or DEFAULT_API_URL,
            private_token=config.private_token,
            root_group_id=config.root_group_id or saved.root_group_id,
        )

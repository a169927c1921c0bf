"""AppSession - Connection settings and the live dashboard of the API process."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from groupwatch.config import ConfigStore, GitLabConfig, RefreshSettings
from groupwatch.dashboard import Dashboard
from groupwatch.gitlab import ConfigurationError, GitLabClient
from groupwatch.scanner import ScanCache, Scanner

if TYPE_CHECKING:
    from groupwatch.state_store import KeyValueStore

logger = logging.getLogger("groupwatch.api.session")


class AppSession:
    """Holds the current configuration, GitLab client and Dashboard.

    Changing the configuration tears down the dashboard; switching to a
    different root group also invalidates the scan cache.
    """

    def __init__(
        self,
        store: KeyValueStore,
        client: GitLabClient,
        config: GitLabConfig,
        refresh_settings: RefreshSettings | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.config = config
        self.refresh_settings = refresh_settings or RefreshSettings()
        self.config_store = ConfigStore(store)
        self.scanner = Scanner(client, ScanCache(store))
        self._dashboard: Dashboard | None = None

    @property
    def configured(self) -> bool:
        return self.config.is_complete and self.client.is_configured

    async def configure(self, config: GitLabConfig) -> None:
        """Switch to new connection settings.

        Raises:
            ConfigError: If the settings are incomplete or invalid.
        """
        config.validate()
        if config.root_group_id != self.config.root_group_id:
            self.scanner.cache.clear()

        await self.close_dashboard()
        await self.client.configure(config.api_url, config.private_token)
        self.config = config
        self.config_store.save(config)

    def require_root_group_id(self) -> str:
        if not self.configured:
            raise ConfigurationError("GitLab configuration not set")
        return self.config.root_group_id

    def dashboard(self) -> Dashboard:
        """Get or create the Dashboard for the configured root group.

        Raises:
            ConfigurationError: If no connection is configured.
        """
        root_group_id = self.require_root_group_id()
        if self._dashboard is None:
            self._dashboard = Dashboard(
                client=self.client,
                scanner=self.scanner,
                root_group_id=root_group_id,
                refresh_settings=self.refresh_settings,
            )
        return self._dashboard

    async def close_dashboard(self) -> None:
        if self._dashboard is not None:
            await self._dashboard.close()
            self._dashboard = None

    async def close(self) -> None:
        await self.close_dashboard()
        await self.client.close()

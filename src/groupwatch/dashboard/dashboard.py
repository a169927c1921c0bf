"""Dashboard - One live view of a root group's pipelines."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from groupwatch.config import RefreshSettings
from groupwatch.dashboard.exceptions import HierarchyNotLoadedError, InvalidFilterError
from groupwatch.dashboard.models import DashboardStats
from groupwatch.gitlab import GitLabError
from groupwatch.hierarchy import (
    FilterOptions,
    HierarchyBuilder,
    apply_filter,
    collect_project_ids,
    count_active_pipelines,
    count_projects,
    parse_status_category,
    set_expanded_all,
    toggle_group,
)
from groupwatch.refresher import AutoRefresher, StatusRefresher, TreeHolder

if TYPE_CHECKING:
    from groupwatch.gitlab import GitLabClient
    from groupwatch.hierarchy import GroupNode
    from groupwatch.scanner import Scanner

logger = logging.getLogger("groupwatch.dashboard")


class Dashboard:
    """Builds the tree for a root group and keeps its pipeline statuses fresh.

    The Dashboard:
    - Builds the hierarchy and records its project IDs in the scan cache
    - Refreshes pipeline statuses on demand and on a timer
    - Keeps expand/collapse state and filter options for the view
    - Derives the filtered tree and its counts
    """

    def __init__(
        self,
        client: GitLabClient,
        scanner: Scanner,
        root_group_id: str,
        refresh_settings: RefreshSettings | None = None,
    ) -> None:
        """Initialize the Dashboard.

        Args:
            client: Configured GitLabClient.
            scanner: Scanner owning the scan cache.
            root_group_id: Root group to display.
            refresh_settings: Auto-refresh settings.
        """
        settings = refresh_settings or RefreshSettings()
        self.client = client
        self.scanner = scanner
        self.root_group_id = root_group_id
        self.builder = HierarchyBuilder(client)
        self.refresher = StatusRefresher(client)
        self.holder = TreeHolder()
        self.filter_options = FilterOptions()
        self.loading = False
        self.error: str | None = None
        self.auto_refresh = AutoRefresher(
            self.refresh,
            is_busy=lambda: self.loading or self.refresher.in_progress,
            interval_seconds=settings.interval_seconds,
        )
        self._auto_refresh_enabled = settings.auto_refresh
        self._refresh_task: asyncio.Task[int] | None = None

    @property
    def tree(self) -> GroupNode | None:
        return self.holder.tree

    @property
    def auto_refresh_enabled(self) -> bool:
        return self._auto_refresh_enabled

    # --- Loading ---

    async def load(self, wait_for_pipelines: bool = False) -> GroupNode:
        """Build the hierarchy, then start refreshing pipeline statuses.

        The tree is available as soon as its structure is known; statuses are
        filled in by a background refresh.

        Args:
            wait_for_pipelines: Wait for the initial refresh to finish.

        Returns:
            The freshly built tree.

        Raises:
            GitLabError: If the root group cannot be fetched.
        """
        self.loading = True
        self.error = None

        cached = self.scanner.cache.get_valid(self.root_group_id)
        if cached is not None:
            logger.info(
                "Last scan of group %s found %d project(s)",
                self.root_group_id,
                len(cached.project_ids),
            )

        try:
            tree = await self.builder.build(int(self.root_group_id))
        except GitLabError as e:
            self.error = f"Error loading hierarchy: {e}"
            logger.error("Hierarchy loading error: %s", e)
            raise
        finally:
            self.loading = False

        await self.holder.set(tree)
        self.scanner.cache.save(collect_project_ids(tree), self.root_group_id)

        self._refresh_task = asyncio.create_task(self.refresh())
        self._refresh_task.add_done_callback(self._record_refresh_failure)
        if wait_for_pipelines:
            await self._refresh_task
        if self._auto_refresh_enabled and not self.auto_refresh.running:
            self.auto_refresh.start()
        return tree

    async def refresh(self) -> int:
        """Re-fetch pipeline statuses for the current tree.

        Does nothing while the hierarchy is loading.

        Returns:
            Number of projects whose status was applied.
        """
        if self.loading or self.holder.tree is None:
            return 0
        return await self.refresher.refresh(self.holder)

    def _record_refresh_failure(self, task: asyncio.Task[int]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.error = f"Error refreshing pipelines: {exc}"
            logger.error("Background pipeline refresh failed: %s", exc)

    async def wait_for_refresh(self) -> None:
        """Wait for the background refresh started by ``load``."""
        if self._refresh_task is not None:
            await self._refresh_task

    async def rescan(self) -> GroupNode:
        """Drop the scan cache and rebuild the hierarchy."""
        self.scanner.cache.clear()
        return await self.load()

    # --- Tree navigation ---

    async def toggle_group(self, group_id: int) -> GroupNode | None:
        return await self.holder.update(lambda tree: toggle_group(tree, group_id))

    async def expand_all(self) -> GroupNode | None:
        return await self.holder.update(lambda tree: set_expanded_all(tree, True))

    async def collapse_all(self) -> GroupNode | None:
        return await self.holder.update(lambda tree: set_expanded_all(tree, False))

    # --- Filters ---

    def set_filter(self, options: FilterOptions) -> None:
        self.filter_options = options

    def derive_filter(
        self,
        search_term: str | None = None,
        pipeline_status: str | None = None,
        show_only_with_pipelines: bool | None = None,
    ) -> FilterOptions:
        """Build filter options from the current ones with the given parts replaced.

        The stored filter is left unchanged.

        Raises:
            InvalidFilterError: If ``pipeline_status`` is not a known status.
        """
        changes: dict[str, Any] = {}
        if search_term is not None:
            changes["search_term"] = search_term
        if pipeline_status is not None:
            try:
                changes["pipeline_status"] = parse_status_category(pipeline_status)
            except ValueError as e:
                raise InvalidFilterError(f"Unknown pipeline status '{pipeline_status}'") from e
        if show_only_with_pipelines is not None:
            changes["show_only_with_pipelines"] = show_only_with_pipelines
        return replace(self.filter_options, **changes)

    def update_filter(
        self,
        search_term: str | None = None,
        pipeline_status: str | None = None,
        show_only_with_pipelines: bool | None = None,
    ) -> FilterOptions:
        """Replace the given parts of the stored filter, keeping the rest."""
        self.filter_options = self.derive_filter(
            search_term, pipeline_status, show_only_with_pipelines
        )
        return self.filter_options

    def clear_filters(self) -> None:
        self.filter_options = FilterOptions()

    @property
    def filtered_tree(self) -> GroupNode | None:
        tree = self.holder.tree
        if tree is None:
            return None
        return apply_filter(tree, self.filter_options)

    def require_tree(
        self, filtered: bool = True, options: FilterOptions | None = None
    ) -> GroupNode:
        """Get the tree, filtered by ``options`` or the stored filter.

        Raises:
            HierarchyNotLoadedError: If ``load`` has not completed yet.
        """
        tree = self.holder.tree
        if tree is None:
            raise HierarchyNotLoadedError(f"Hierarchy of group {self.root_group_id} not loaded")
        if not filtered:
            return tree
        return apply_filter(tree, options or self.filter_options)

    def stats(self) -> DashboardStats:
        """Compute the counts for the current tree and filter."""
        cached = self.scanner.cache.get_valid(self.root_group_id)
        stats = DashboardStats(
            cached_projects=len(cached.project_ids) if cached is not None else None,
            loading=self.loading,
            refreshing=self.refresher.in_progress,
            error=self.error,
        )
        tree = self.holder.tree
        if tree is None:
            return stats
        filtered = apply_filter(tree, self.filter_options)
        stats.total_projects = count_projects(tree)
        stats.filtered_projects = count_projects(filtered)
        stats.active_pipelines = count_active_pipelines(filtered)
        return stats

    # --- Auto-refresh ---

    def set_auto_refresh(self, enabled: bool, interval_seconds: float | None = None) -> None:
        """Enable or disable the refresh timer, optionally changing its interval."""
        if interval_seconds is not None:
            self.auto_refresh.set_interval(interval_seconds)
        self._auto_refresh_enabled = enabled
        if enabled and not self.auto_refresh.running:
            self.auto_refresh.start()
        elif not enabled:
            self.auto_refresh.stop()

    async def close(self) -> None:
        """Tear down the view.

        Stops the timer. Requests still in flight may complete but their
        results are no longer applied.
        """
        self.auto_refresh.stop()
        self.holder.close()
        if self._refresh_task is not None and not self._refresh_task.done():
            self._refresh_task.cancel()
        logger.info("Dashboard for group %s closed", self.root_group_id)

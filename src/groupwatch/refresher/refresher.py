"""StatusRefresher - Fetches the latest pipeline of every project in the tree."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from functools import partial
from typing import TYPE_CHECKING

from groupwatch.gitlab import ConfigurationError, GitLabRequestError
from groupwatch.hierarchy import collect_project_ids, replace_project
from groupwatch.refresher.models import RefreshOutcome

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from groupwatch.gitlab import GitLabClient, Pipeline
    from groupwatch.hierarchy import ProjectNode
    from groupwatch.refresher.holder import TreeHolder

logger = logging.getLogger("groupwatch.refresher")


def apply_pipeline(project: ProjectNode, pipeline: Pipeline | None) -> ProjectNode:
    return replace(project, pipeline=pipeline, loading=False, error=None)


def apply_error(project: ProjectNode, message: str) -> ProjectNode:
    return replace(project, pipeline=None, loading=False, error=message)


class StatusRefresher:
    """Refreshes pipeline statuses independently per project.

    Each project gets its own request. Results are folded into the tree in
    whatever order they complete.
    """

    def __init__(self, client: GitLabClient) -> None:
        """Initialize the refresher.

        Args:
            client: GitLabClient used to fetch pipelines.
        """
        self.client = client
        self._active_runs = 0

    @property
    def in_progress(self) -> bool:
        return self._active_runs > 0

    async def refresh_all(self, holder: TreeHolder) -> AsyncIterator[RefreshOutcome]:
        """Fetch every project's latest pipeline and apply each result as it arrives.

        Project IDs are taken from the holder's tree when the run starts; the
        structure is not re-discovered. Results arriving after the holder is
        closed are not applied and end the run.

        Yields:
            One RefreshOutcome per applied result.

        Raises:
            ConfigurationError: If the client is not configured.
        """
        if not self.client.is_configured:
            raise ConfigurationError("GitLab configuration not set")
        tree = holder.tree
        if tree is None:
            return

        project_ids = collect_project_ids(tree)
        logger.info("Refreshing pipelines of %d project(s)", len(project_ids))

        self._active_runs += 1
        tasks = [asyncio.create_task(self._fetch(pid)) for pid in project_ids]
        try:
            for next_done in asyncio.as_completed(tasks):
                project_id, pipeline, error = await next_done

                if error is None:
                    update = partial(apply_pipeline, pipeline=pipeline)
                else:
                    update = partial(apply_error, message=error)
                new_tree = await holder.update(
                    lambda current: replace_project(current, project_id, update)
                )

                if new_tree is None:
                    logger.info("Tree closed, abandoning refresh")
                    return
                yield RefreshOutcome(
                    project_id=project_id, pipeline=pipeline, error=error, tree=new_tree
                )
        finally:
            self._active_runs -= 1
            for task in tasks:
                if not task.done():
                    task.cancel()

    async def refresh(self, holder: TreeHolder) -> int:
        """Run a full refresh and return the number of applied results."""
        applied = 0
        failed = 0
        async for outcome in self.refresh_all(holder):
            applied += 1
            if not outcome.ok:
                failed += 1
        logger.info("Refresh finished: %d applied, %d failed", applied, failed)
        return applied

    async def _fetch(self, project_id: int) -> tuple[int, Pipeline | None, str | None]:
        try:
            pipeline = await self.client.get_latest_pipeline(project_id)
        except GitLabRequestError as e:
            logger.warning("Failed to fetch pipeline for project %s: %s", project_id, e)
            return project_id, None, str(e)
        return project_id, pipeline, None

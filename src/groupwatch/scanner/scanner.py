"""Scanner - Collects project IDs below a root group, with caching."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from groupwatch.scanner.models import ScanInfo

if TYPE_CHECKING:
    from groupwatch.gitlab import GitLabClient
    from groupwatch.scanner.cache import ScanCache

logger = logging.getLogger("groupwatch.scanner")


class Scanner:
    """Answers "which projects live below this group" from cache or a fresh scan."""

    def __init__(self, client: GitLabClient, cache: ScanCache) -> None:
        """Initialize the Scanner.

        Args:
            client: GitLabClient used for scanning.
            cache: ScanCache holding the last result.
        """
        self.client = client
        self.cache = cache

    async def get_project_ids(self, root_group_id: str, force_scan: bool = False) -> list[int]:
        """Return the project IDs below ``root_group_id``.

        Uses the cached record when it belongs to the same root group, unless
        ``force_scan`` is set.

        Args:
            root_group_id: Root group ID as configured.
            force_scan: Ignore the cache and scan again.

        Returns:
            Project IDs of the group and all its subgroups.

        Raises:
            GitLabError: If the root group cannot be fetched.
        """
        if not force_scan:
            record = self.cache.get_valid(root_group_id)
            if record is not None:
                logger.info(
                    "Using cached project IDs (%d projects, last scan: %s)",
                    len(record.project_ids),
                    record.last_scan,
                )
                return list(record.project_ids)

        return await self._scan_and_store(root_group_id)

    async def rescan(self, root_group_id: str) -> list[int]:
        """Clear the cache and scan again."""
        self.cache.clear()
        return await self.get_project_ids(root_group_id, force_scan=True)

    def last_scan_info(self) -> ScanInfo | None:
        record = self.cache.load()
        if record is None:
            return None
        return ScanInfo(last_scan=record.last_scan, project_count=len(record.project_ids))

    async def _scan_and_store(self, root_group_id: str) -> list[int]:
        group_id = int(root_group_id)
        logger.info("Starting fresh scan of group %s", root_group_id)

        # The root group must exist; listing failures below it are tolerated
        group = await self.client.get_group(group_id)
        logger.info("Found group: %s (%s)", group.name, group.full_path)

        project_ids = await self.client.get_all_project_ids(group_id)
        logger.info("Scan completed: found %d project(s)", len(project_ids))

        if not project_ids:
            logger.warning("No projects found in group %s or its subgroups", root_group_id)
        self.cache.save(project_ids, root_group_id)
        return project_ids

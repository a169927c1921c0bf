"""HierarchyBuilder - Builds the group tree from the GitLab API."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from groupwatch.hierarchy.models import GroupNode, ProjectNode, TreeNode

if TYPE_CHECKING:
    from groupwatch.gitlab import GitLabClient

logger = logging.getLogger("groupwatch.hierarchy")


class HierarchyBuilder:
    """Recursively discovers the groups and projects below a root group.

    Only the structure is discovered here. Project nodes start out with
    ``loading=True``; their pipelines are fetched afterwards by the
    StatusRefresher.
    """

    def __init__(self, client: GitLabClient) -> None:
        """Initialize the builder.

        Args:
            client: GitLabClient used for all requests.
        """
        self.client = client

    async def build(self, root_group_id: int) -> GroupNode:
        """Build the full tree below ``root_group_id``.

        Raises:
            GitLabError: If the root group (or any group's own metadata)
                cannot be fetched. Inaccessible subgroup and project listings
                are treated as empty instead.
        """
        logger.info("Building hierarchy for group %s", root_group_id)
        tree = await self._build_group_node(root_group_id)
        logger.info("Hierarchy for group %s built (%s)", root_group_id, tree.full_path)
        return tree

    async def _build_group_node(self, group_id: int) -> GroupNode:
        group = await self.client.get_group(group_id)

        subgroups, projects = await asyncio.gather(
            self.client.get_subgroups(group_id),
            self.client.get_group_projects(group_id),
        )

        subgroup_nodes: list[GroupNode] = []
        if subgroups:
            subgroup_nodes = list(
                await asyncio.gather(*(self._build_group_node(sg.id) for sg in subgroups))
            )

        children: tuple[TreeNode, ...] = (
            *subgroup_nodes,
            *(ProjectNode.from_project(p) for p in projects),
        )
        logger.debug(
            "Group %s: %d subgroup(s), %d project(s)",
            group.full_path,
            len(subgroup_nodes),
            len(projects),
        )
        return GroupNode.from_group(group, children)

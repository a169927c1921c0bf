"""Hierarchy - Immutable group/project tree, its transforms and filters."""

from groupwatch.hierarchy.builder import HierarchyBuilder
from groupwatch.hierarchy.filters import (
    STATUS_CATEGORIES,
    FilterOptions,
    apply_filter,
    count_active_pipelines,
    count_projects,
    parse_status_category,
    project_matches,
)
from groupwatch.hierarchy.models import GroupNode, ProjectNode, RefreshState, TreeNode
from groupwatch.hierarchy.mutations import (
    collapse_all,
    collect_project_ids,
    expand_all,
    find_project,
    iter_projects,
    replace_project,
    set_expanded_all,
    toggle_group,
)

__all__ = [
    "STATUS_CATEGORIES",
    "FilterOptions",
    "GroupNode",
    "HierarchyBuilder",
    "ProjectNode",
    "RefreshState",
    "TreeNode",
    "apply_filter",
    "collapse_all",
    "collect_project_ids",
    "count_active_pipelines",
    "count_projects",
    "expand_all",
    "find_project",
    "iter_projects",
    "parse_status_category",
    "project_matches",
    "replace_project",
    "set_expanded_all",
    "toggle_group",
]

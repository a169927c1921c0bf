"""Filtered views of the hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from groupwatch.gitlab.models import ACTIVE_STATUSES, PipelineStatus
from groupwatch.hierarchy.models import GroupNode, ProjectNode, TreeNode
from groupwatch.hierarchy.mutations import iter_projects

StatusCategory = Literal["all", "active", "none"] | PipelineStatus

STATUS_CATEGORIES: tuple[str, ...] = ("all", "active", "none", *(s.value for s in PipelineStatus))


def parse_status_category(value: str) -> StatusCategory:
    """Parse a status filter value.

    Raises:
        ValueError: If ``value`` is neither a category nor a pipeline status.
    """
    if value in ("all", "active", "none"):
        return value  # type: ignore[return-value]
    return PipelineStatus(value)


@dataclass(frozen=True)
class FilterOptions:
    """Search and status filters applied to the tree."""

    search_term: str = ""
    pipeline_status: StatusCategory = "all"
    show_only_with_pipelines: bool = False

    @property
    def is_default(self) -> bool:
        return self == FilterOptions()


def project_matches(project: ProjectNode, options: FilterOptions) -> bool:
    """Check a single project against the filter options."""
    if options.search_term:
        needle = options.search_term.lower()
        if (
            needle not in project.name.lower()
            and needle not in project.path_with_namespace.lower()
        ):
            return False

    pipeline = project.pipeline
    category = options.pipeline_status
    if category == "active":
        if pipeline is None or pipeline.status not in ACTIVE_STATUSES:
            return False
    elif category == "none":
        if pipeline is not None:
            return False
    elif category != "all":
        if pipeline is None or pipeline.status != category:
            return False

    if options.show_only_with_pipelines and pipeline is None:
        return False

    return True


def _filter_group(group: GroupNode, options: FilterOptions) -> GroupNode | None:
    children: list[TreeNode] = []
    for child in group.children:
        if isinstance(child, GroupNode):
            filtered = _filter_group(child, options)
            if filtered is not None:
                children.append(filtered)
        elif project_matches(child, options):
            children.append(child)

    # Groups with nothing left are pruned
    if not children:
        return None
    if len(children) == len(group.children) and all(
        new is old for new, old in zip(children, group.children, strict=True)
    ):
        return group
    return replace(group, children=tuple(children))


def apply_filter(tree: GroupNode, options: FilterOptions) -> GroupNode:
    """Return the filtered view of ``tree``.

    Projects failing the filter are removed and groups left without any
    matching descendant are pruned. The root itself is always returned,
    with no children if nothing matches.
    """
    filtered = _filter_group(tree, options)
    if filtered is None:
        return replace(tree, children=())
    return filtered


def count_projects(tree: GroupNode) -> int:
    return sum(1 for _ in iter_projects(tree))


def count_active_pipelines(tree: GroupNode) -> int:
    """Count projects whose latest pipeline has not finished."""
    return sum(
        1
        for project in iter_projects(tree)
        if project.pipeline is not None and project.pipeline.is_active
    )

"""Tree node models for the group hierarchy.

Nodes are immutable. Every change produces a new node; unchanged subtrees
are shared between the old and the new tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar, TypeAlias

from groupwatch.gitlab.models import Group, Pipeline, Project


class RefreshState(StrEnum):
    """Pipeline refresh state of a project node."""

    LOADING = "loading"
    ERROR = "error"
    PIPELINE = "pipeline"
    NO_PIPELINE = "no_pipeline"


@dataclass(frozen=True)
class ProjectNode:
    """Leaf node: a single project and its latest pipeline."""

    kind: ClassVar[str] = "project"

    id: int
    name: str
    path_with_namespace: str
    web_url: str
    pipeline: Pipeline | None = None
    loading: bool = False
    error: str | None = None

    @classmethod
    def from_project(cls, project: Project) -> ProjectNode:
        """Create a node whose pipeline has not been fetched yet."""
        return cls(
            id=project.id,
            name=project.name,
            path_with_namespace=project.path_with_namespace,
            web_url=project.web_url,
            loading=True,
        )

    @property
    def state(self) -> RefreshState:
        if self.loading:
            return RefreshState.LOADING
        if self.error is not None:
            return RefreshState.ERROR
        if self.pipeline is not None:
            return RefreshState.PIPELINE
        return RefreshState.NO_PIPELINE


@dataclass(frozen=True)
class GroupNode:
    """Container node: a group with its subgroups and projects."""

    kind: ClassVar[str] = "group"

    id: int
    name: str
    full_path: str
    expanded: bool = True
    children: tuple[TreeNode, ...] = field(default_factory=tuple)

    @classmethod
    def from_group(cls, group: Group, children: tuple[TreeNode, ...] = ()) -> GroupNode:
        return cls(
            id=group.id,
            name=group.name,
            full_path=group.full_path,
            children=children,
        )


TreeNode: TypeAlias = GroupNode | ProjectNode

"""Data models for the Refresher module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from groupwatch.gitlab import Pipeline
    from groupwatch.hierarchy import GroupNode


@dataclass(frozen=True)
class RefreshOutcome:
    """Result of refreshing one project.

    Attributes:
        project_id: The refreshed project.
        pipeline: Latest pipeline, or None if there is none or the fetch failed.
        error: Failure message, or None on success.
        tree: The tree after this outcome was applied.
    """

    project_id: int
    pipeline: Pipeline | None
    error: str | None
    tree: GroupNode

    @property
    def ok(self) -> bool:
        return self.error is None

"""Data models for the Dashboard module."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class DashboardStats:
    """Counts shown above the tree.

    Attributes:
        total_projects: Projects in the full tree.
        filtered_projects: Projects in the filtered view.
        active_pipelines: Projects in the filtered view with an unfinished pipeline.
        cached_projects: Project count of the last scan, if one is cached.
        loading: Whether the hierarchy is being built.
        refreshing: Whether pipeline statuses are being refreshed.
        error: Last structural error, if any.
    """

    total_projects: int = 0
    filtered_projects: int = 0
    active_pipelines: int = 0
    cached_projects: int | None = None
    loading: bool = False
    refreshing: bool = False
    error: str | None = None

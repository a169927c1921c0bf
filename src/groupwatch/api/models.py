"""Pydantic models for REST API."""

from typing import Annotated, Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from groupwatch.gitlab import Pipeline
from groupwatch.hierarchy import GroupNode, ProjectNode

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Config models


class ConfigRequest(BaseModel):
    """Request model for setting the GitLab connection."""

    api_url: str = Field(default="https://gitlab.com", min_length=1, max_length=500)
    private_token: str = Field(..., min_length=1)
    root_group_id: str = Field(..., min_length=1, max_length=50, pattern=r"^\d+$")


class ConfigResponse(BaseModel):
    """Response model for the connection settings. The token is never returned."""

    api_url: str
    root_group_id: str
    configured: bool


class ConnectionCheckResponse(BaseModel):
    """Response model for a connection check."""

    ok: bool
    message: str
    group_name: str | None = None
    group_full_path: str | None = None


# Tree models


class PipelineResponse(BaseModel):
    """Response model for a pipeline snapshot."""

    id: int
    project_id: int
    status: str
    ref: str
    sha: str
    web_url: str
    created_at: str
    updated_at: str
    started_at: str | None = None
    finished_at: str | None = None


def pipeline_to_response(pipeline: Pipeline) -> PipelineResponse:
    """Convert a Pipeline snapshot to PipelineResponse."""
    return PipelineResponse(
        id=pipeline.id,
        project_id=pipeline.project_id,
        status=pipeline.status.value,
        ref=pipeline.ref,
        sha=pipeline.sha,
        web_url=pipeline.web_url,
        created_at=pipeline.created_at,
        updated_at=pipeline.updated_at,
        started_at=pipeline.started_at,
        finished_at=pipeline.finished_at,
    )


class ProjectNodeResponse(BaseModel):
    """Response model for a project node."""

    kind: Literal["project"] = "project"
    id: int
    name: str
    path_with_namespace: str
    web_url: str
    pipeline: PipelineResponse | None = None
    loading: bool
    error: str | None = None
    state: str


class GroupNodeResponse(BaseModel):
    """Response model for a group node and its children."""

    kind: Literal["group"] = "group"
    id: int
    name: str
    full_path: str
    expanded: bool
    children: list["TreeNodeResponse"] = Field(default_factory=list)


TreeNodeResponse = Annotated[
    GroupNodeResponse | ProjectNodeResponse, Field(discriminator="kind")
]

GroupNodeResponse.model_rebuild()


def project_node_to_response(node: ProjectNode) -> ProjectNodeResponse:
    """Convert a ProjectNode to ProjectNodeResponse."""
    return ProjectNodeResponse(
        id=node.id,
        name=node.name,
        path_with_namespace=node.path_with_namespace,
        web_url=node.web_url,
        pipeline=pipeline_to_response(node.pipeline) if node.pipeline else None,
        loading=node.loading,
        error=node.error,
        state=node.state.value,
    )


def group_node_to_response(node: GroupNode) -> GroupNodeResponse:
    """Convert a GroupNode (recursively) to GroupNodeResponse."""
    children: list[Any] = [
        group_node_to_response(child)
        if isinstance(child, GroupNode)
        else project_node_to_response(child)
        for child in node.children
    ]
    return GroupNodeResponse(
        id=node.id,
        name=node.name,
        full_path=node.full_path,
        expanded=node.expanded,
        children=children,
    )


class FilterRequest(BaseModel):
    """Request model for the tree filter."""

    search_term: str = Field(default="", max_length=255)
    pipeline_status: str = "all"
    show_only_with_pipelines: bool = False


class FilterResponse(BaseModel):
    """Response model for the current tree filter."""

    search_term: str
    pipeline_status: str
    show_only_with_pipelines: bool


class StatsResponse(BaseModel):
    """Response model for tree statistics."""

    model_config = ConfigDict(from_attributes=True)

    total_projects: int
    filtered_projects: int
    active_pipelines: int
    cached_projects: int | None
    loading: bool
    refreshing: bool
    error: str | None


def stats_to_response(stats: Any) -> StatsResponse:
    """Convert DashboardStats to StatsResponse."""
    return StatsResponse.model_validate(stats)


# Refresh models


class RefreshResponse(BaseModel):
    """Response model for a manual refresh."""

    refreshed: int


class AutoRefreshRequest(BaseModel):
    """Request model for auto-refresh settings."""

    enabled: bool
    interval_seconds: int | None = Field(default=None, ge=5, le=3600)


class AutoRefreshResponse(BaseModel):
    """Response model for auto-refresh settings."""

    enabled: bool
    running: bool
    interval_seconds: float


# Scan models


class ScanResponse(BaseModel):
    """Response model for a project ID scan."""

    root_group_id: str
    project_ids: list[int]
    project_count: int


class ScanInfoResponse(BaseModel):
    """Response model for the last scan."""

    model_config = ConfigDict(from_attributes=True)

    last_scan: str
    project_count: int


# Project models


class ProjectResponse(BaseModel):
    """Response model for a project."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    path_with_namespace: str
    web_url: str
    description: str | None = None

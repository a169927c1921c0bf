"""Hierarchy tree endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from groupwatch.api.dependencies import DashboardDep
from groupwatch.api.models import (
    APIResponse,
    FilterRequest,
    FilterResponse,
    GroupNodeResponse,
    StatsResponse,
    group_node_to_response,
    stats_to_response,
)
from groupwatch.dashboard import Dashboard

router = APIRouter(prefix="/hierarchy", tags=["hierarchy"])


def _filtered_tree_response(dashboard: Dashboard) -> APIResponse[GroupNodeResponse]:
    return APIResponse(data=group_node_to_response(dashboard.require_tree()))


def _filter_response(dashboard: Dashboard) -> APIResponse[FilterResponse]:
    options = dashboard.filter_options
    return APIResponse(
        data=FilterResponse(
            search_term=options.search_term,
            pipeline_status=str(options.pipeline_status),
            show_only_with_pipelines=options.show_only_with_pipelines,
        )
    )


@router.get("", response_model=APIResponse[GroupNodeResponse])
def get_hierarchy(
    dashboard: DashboardDep,
    search: str | None = None,
    pipeline_status: Annotated[str | None, Query(alias="status")] = None,
    only_with_pipelines: bool | None = None,
) -> APIResponse[GroupNodeResponse]:
    """Get the tree with the current filter applied.

    Query parameters that are given override the matching part of the stored
    filter for this response only; use PUT /filter to change it.
    """
    options = dashboard.derive_filter(
        search_term=search,
        pipeline_status=pipeline_status,
        show_only_with_pipelines=only_with_pipelines,
    )
    return APIResponse(data=group_node_to_response(dashboard.require_tree(options=options)))


@router.get("/full", response_model=APIResponse[GroupNodeResponse])
def get_full_hierarchy(dashboard: DashboardDep) -> APIResponse[GroupNodeResponse]:
    """Get the unfiltered tree."""
    return APIResponse(data=group_node_to_response(dashboard.require_tree(filtered=False)))


@router.post("/load", response_model=APIResponse[GroupNodeResponse])
async def load_hierarchy(
    dashboard: DashboardDep, wait: bool = False
) -> APIResponse[GroupNodeResponse]:
    """Build the tree. Pipeline statuses load in the background unless ``wait`` is set."""
    await dashboard.load(wait_for_pipelines=wait)
    return _filtered_tree_response(dashboard)


@router.post("/rescan", response_model=APIResponse[GroupNodeResponse])
async def rescan_hierarchy(dashboard: DashboardDep) -> APIResponse[GroupNodeResponse]:
    """Drop the scan cache and rebuild the tree."""
    await dashboard.rescan()
    return _filtered_tree_response(dashboard)


@router.post("/groups/{group_id}/toggle", response_model=APIResponse[GroupNodeResponse])
async def toggle_group(group_id: int, dashboard: DashboardDep) -> APIResponse[GroupNodeResponse]:
    """Expand or collapse one group."""
    await dashboard.toggle_group(group_id)
    return _filtered_tree_response(dashboard)


@router.post("/expand", response_model=APIResponse[GroupNodeResponse])
async def expand_all(dashboard: DashboardDep) -> APIResponse[GroupNodeResponse]:
    """Expand every group."""
    await dashboard.expand_all()
    return _filtered_tree_response(dashboard)


@router.post("/collapse", response_model=APIResponse[GroupNodeResponse])
async def collapse_all(dashboard: DashboardDep) -> APIResponse[GroupNodeResponse]:
    """Collapse every group."""
    await dashboard.collapse_all()
    return _filtered_tree_response(dashboard)


@router.get("/filter", response_model=APIResponse[FilterResponse])
def get_filter(dashboard: DashboardDep) -> APIResponse[FilterResponse]:
    """Get the current filter."""
    return _filter_response(dashboard)


@router.put("/filter", response_model=APIResponse[FilterResponse])
def set_filter(request: FilterRequest, dashboard: DashboardDep) -> APIResponse[FilterResponse]:
    """Set the whole filter."""
    dashboard.update_filter(
        search_term=request.search_term,
        pipeline_status=request.pipeline_status,
        show_only_with_pipelines=request.show_only_with_pipelines,
    )
    return _filter_response(dashboard)


@router.delete("/filter", response_model=APIResponse[FilterResponse])
def clear_filter(dashboard: DashboardDep) -> APIResponse[FilterResponse]:
    """Reset the filter."""
    dashboard.clear_filters()
    return _filter_response(dashboard)


@router.get("/stats", response_model=APIResponse[StatsResponse])
def get_stats(dashboard: DashboardDep) -> APIResponse[StatsResponse]:
    """Get project and pipeline counts."""
    return APIResponse(data=stats_to_response(dashboard.stats()))

"""Pipeline status refresh endpoints."""

from fastapi import APIRouter

from groupwatch.api.dependencies import DashboardDep
from groupwatch.api.models import (
    APIResponse,
    AutoRefreshRequest,
    AutoRefreshResponse,
    RefreshResponse,
)
from groupwatch.dashboard import Dashboard

router = APIRouter(prefix="/refresh", tags=["refresh"])


def _auto_refresh_response(dashboard: Dashboard) -> AutoRefreshResponse:
    return AutoRefreshResponse(
        enabled=dashboard.auto_refresh_enabled,
        running=dashboard.auto_refresh.running,
        interval_seconds=dashboard.auto_refresh.interval_seconds,
    )


@router.post("", response_model=APIResponse[RefreshResponse])
async def refresh_pipelines(dashboard: DashboardDep) -> APIResponse[RefreshResponse]:
    """Re-fetch the latest pipeline of every project in the tree."""
    refreshed = await dashboard.refresh()
    return APIResponse(data=RefreshResponse(refreshed=refreshed))


@router.get("/auto", response_model=APIResponse[AutoRefreshResponse])
def get_auto_refresh(dashboard: DashboardDep) -> APIResponse[AutoRefreshResponse]:
    """Get auto-refresh settings."""
    return APIResponse(data=_auto_refresh_response(dashboard))


@router.put("/auto", response_model=APIResponse[AutoRefreshResponse])
async def set_auto_refresh(
    request: AutoRefreshRequest, dashboard: DashboardDep
) -> APIResponse[AutoRefreshResponse]:
    """Enable or disable auto-refresh."""
    dashboard.set_auto_refresh(request.enabled, request.interval_seconds)
    return APIResponse(data=_auto_refresh_response(dashboard))

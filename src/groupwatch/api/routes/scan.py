"""Project ID scan endpoints."""

from fastapi import APIRouter

from groupwatch.api.dependencies import SessionDep
from groupwatch.api.models import APIResponse, ScanInfoResponse, ScanResponse

router = APIRouter(prefix="/scan", tags=["scan"])


def _scan_response(root_group_id: str, project_ids: list[int]) -> APIResponse[ScanResponse]:
    return APIResponse(
        data=ScanResponse(
            root_group_id=root_group_id,
            project_ids=project_ids,
            project_count=len(project_ids),
        )
    )


@router.get("", response_model=APIResponse[ScanInfoResponse])
def get_last_scan(session: SessionDep) -> APIResponse[ScanInfoResponse]:
    """Get information about the last scan. ``data`` is null if nothing is cached."""
    info = session.scanner.last_scan_info()
    if info is None:
        return APIResponse(data=None)
    return APIResponse(data=ScanInfoResponse.model_validate(info))


@router.post("", response_model=APIResponse[ScanResponse])
async def scan_projects(session: SessionDep, force: bool = False) -> APIResponse[ScanResponse]:
    """Get the project IDs below the root group, from cache unless ``force`` is set."""
    root_group_id = session.require_root_group_id()
    project_ids = await session.scanner.get_project_ids(root_group_id, force_scan=force)
    return _scan_response(root_group_id, project_ids)


@router.post("/rescan", response_model=APIResponse[ScanResponse])
async def rescan_projects(session: SessionDep) -> APIResponse[ScanResponse]:
    """Clear the cache and scan again."""
    root_group_id = session.require_root_group_id()
    project_ids = await session.scanner.rescan(root_group_id)
    return _scan_response(root_group_id, project_ids)

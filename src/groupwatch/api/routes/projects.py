"""Project detail endpoints."""

from fastapi import APIRouter

from groupwatch.api.dependencies import SessionDep
from groupwatch.api.models import (
    APIResponse,
    PipelineResponse,
    ProjectResponse,
    pipeline_to_response,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("/{project_id}", response_model=APIResponse[ProjectResponse])
async def get_project(project_id: int, session: SessionDep) -> APIResponse[ProjectResponse]:
    """Get a project by ID."""
    session.require_root_group_id()
    project = await session.client.get_project(project_id)
    return APIResponse(data=ProjectResponse.model_validate(project))


@router.get(
    "/{project_id}/pipelines/active",
    response_model=APIResponse[list[PipelineResponse]],
)
async def list_active_pipelines(
    project_id: int, session: SessionDep
) -> APIResponse[list[PipelineResponse]]:
    """List the unfinished pipelines of a project."""
    session.require_root_group_id()
    pipelines = await session.client.get_active_pipelines(project_id)
    return APIResponse(data=[pipeline_to_response(p) for p in pipelines])

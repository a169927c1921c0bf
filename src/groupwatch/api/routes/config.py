"""Connection settings endpoints."""

from fastapi import APIRouter

from groupwatch.api.dependencies import SessionDep
from groupwatch.api.models import (
    APIResponse,
    ConfigRequest,
    ConfigResponse,
    ConnectionCheckResponse,
)
from groupwatch.config import GitLabConfig
from groupwatch.gitlab import GitLabError, describe_connection_error

router = APIRouter(prefix="/config", tags=["config"])


@router.get("", response_model=APIResponse[ConfigResponse])
def get_config(session: SessionDep) -> APIResponse[ConfigResponse]:
    """Get the connection settings (without the token)."""
    return APIResponse(
        data=ConfigResponse(
            api_url=session.config.api_url,
            root_group_id=session.config.root_group_id,
            configured=session.configured,
        )
    )


@router.put("", response_model=APIResponse[ConfigResponse])
async def update_config(config: ConfigRequest, session: SessionDep) -> APIResponse[ConfigResponse]:
    """Set the connection settings. The token is kept in memory only."""
    await session.configure(
        GitLabConfig(
            api_url=config.api_url,
            private_token=config.private_token,
            root_group_id=config.root_group_id,
        )
    )
    return APIResponse(
        data=ConfigResponse(
            api_url=session.config.api_url,
            root_group_id=session.config.root_group_id,
            configured=session.configured,
        )
    )


@router.post("/check", response_model=APIResponse[ConnectionCheckResponse])
async def check_connection(session: SessionDep) -> APIResponse[ConnectionCheckResponse]:
    """Check that the token can read the root group."""
    root_group_id = session.require_root_group_id()
    try:
        group = await session.client.check_connection(int(root_group_id))
    except GitLabError as e:
        message = describe_connection_error(e)
        return APIResponse(data=ConnectionCheckResponse(ok=False, message=message), error=message)
    return APIResponse(
        data=ConnectionCheckResponse(
            ok=True,
            message=f"Connected to {group.full_path}",
            group_name=group.name,
            group_full_path=group.full_path,
        )
    )

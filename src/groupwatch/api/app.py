"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from groupwatch.api.dependencies import close_session, init_session
from groupwatch.api.models import APIResponse
from groupwatch.api.routes import config, hierarchy, projects, refresh, scan
from groupwatch.api.session import AppSession
from groupwatch.config import ConfigError, ConfigStore, GitLabConfig, RefreshSettings
from groupwatch.dashboard import HierarchyNotLoadedError, InvalidFilterError
from groupwatch.gitlab import (
    ConfigurationError,
    GitLabClient,
    GitLabError,
    GitLabRequestError,
    GroupAccessDeniedError,
    GroupNotFoundError,
    InvalidTokenError,
)
from groupwatch.state_store import KeyValueStore, StateStoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    import httpx

logger = logging.getLogger("groupwatch.api")


def _error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=error).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    db_path = app.state.db_path if hasattr(app.state, "db_path") else "groupwatch.db"
    transport: httpx.AsyncBaseTransport | None = getattr(app.state, "transport", None)
    store = KeyValueStore(db_path)

    gitlab_config = ConfigStore(store).merge_with(GitLabConfig.from_env())
    client = GitLabClient(transport=transport)
    if gitlab_config.is_complete:
        await client.configure(gitlab_config.api_url, gitlab_config.private_token)
        logger.info(
            "Watching group %s on %s", gitlab_config.root_group_id, gitlab_config.api_url
        )
    else:
        logger.info("GitLab connection not configured yet")

    init_session(
        AppSession(
            store=store,
            client=client,
            config=gitlab_config,
            refresh_settings=RefreshSettings.from_env(),
        )
    )

    yield
    # Shutdown
    await close_session()
    store.close()


def create_app(
    db_path: str = "groupwatch.db",
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="GroupWatch API",
        description="REST API for GroupWatch - GitLab group pipeline dashboard",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.db_path = db_path
    app.state.transport = transport

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(ConfigError)
    async def config_error_handler(_request: Request, exc: ConfigError) -> JSONResponse:
        return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    @app.exception_handler(InvalidFilterError)
    async def invalid_filter_handler(_request: Request, exc: InvalidFilterError) -> JSONResponse:
        return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    @app.exception_handler(HierarchyNotLoadedError)
    async def not_loaded_handler(_request: Request, _exc: HierarchyNotLoadedError) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, "Hierarchy not loaded")

    @app.exception_handler(ConfigurationError)
    async def not_configured_handler(_request: Request, _exc: ConfigurationError) -> JSONResponse:
        return _error_response(status.HTTP_409_CONFLICT, "GitLab connection is not configured")

    @app.exception_handler(InvalidTokenError)
    async def invalid_token_handler(_request: Request, _exc: InvalidTokenError) -> JSONResponse:
        return _error_response(status.HTTP_401_UNAUTHORIZED, "Invalid access token")

    @app.exception_handler(GroupAccessDeniedError)
    async def access_denied_handler(
        _request: Request, _exc: GroupAccessDeniedError
    ) -> JSONResponse:
        return _error_response(status.HTTP_403_FORBIDDEN, "Access to the group is forbidden")

    @app.exception_handler(GroupNotFoundError)
    async def group_not_found_handler(_request: Request, _exc: GroupNotFoundError) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, "Group not found")

    @app.exception_handler(GitLabRequestError)
    async def request_error_handler(_request: Request, exc: GitLabRequestError) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _error_response(status.HTTP_404_NOT_FOUND, "Not found on GitLab")
        return _error_response(status.HTTP_502_BAD_GATEWAY, f"GitLab request failed: {exc}")

    @app.exception_handler(GitLabError)
    async def gitlab_error_handler(_request: Request, exc: GitLabError) -> JSONResponse:
        return _error_response(status.HTTP_502_BAD_GATEWAY, str(exc))

    @app.exception_handler(StateStoreError)
    async def state_store_error_handler(_request: Request, _exc: StateStoreError) -> JSONResponse:
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    # Include routers
    app.include_router(config.router, prefix="/api/v1")
    app.include_router(hierarchy.router, prefix="/api/v1")
    app.include_router(refresh.router, prefix="/api/v1")
    app.include_router(scan.router, prefix="/api/v1")
    app.include_router(projects.router, prefix="/api/v1")

    return app

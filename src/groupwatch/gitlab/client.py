"""GitLabClient - Async client for the GitLab REST API (v4)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from groupwatch.gitlab.exceptions import (
    ConfigurationError,
    GitLabRequestError,
    GroupAccessDeniedError,
    GroupNotFoundError,
    InvalidTokenError,
)
from groupwatch.gitlab.models import ACTIVE_STATUSES, Group, Pipeline, PipelineStatus, Project
from groupwatch.gitlab.pagination import MAX_PER_PAGE, Page, fetch_all, parse_next_page
from groupwatch.logging import sanitize_for_log

logger = logging.getLogger("groupwatch.gitlab")

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_CONCURRENT_REQUESTS = 10

T = TypeVar("T")


def _parse(from_api: Callable[[Any], T], data: Any, endpoint: str) -> T:
    """Build a model from an API payload.

    Raises:
        GitLabRequestError: If the payload lacks a field or holds an unexpected value
    """
    try:
        return from_api(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("GET %s returned an unexpected payload: %s", endpoint, e)
        raise GitLabRequestError(f"GET {endpoint} returned an unexpected payload: {e!r}") from e


def _decode(response: httpx.Response, endpoint: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        logger.warning("GET %s returned a body that is not JSON", endpoint)
        raise GitLabRequestError(f"GET {endpoint} returned malformed JSON: {e}") from e


class GitLabClient:
    """Read-only client for groups, projects and pipelines.

    Every request carries the ``PRIVATE-TOKEN`` header. The number of requests
    in flight at once is bounded by ``max_concurrent_requests``.
    """

    def __init__(
        self,
        api_url: str | None = None,
        private_token: str | None = None,
        max_concurrent_requests: int = DEFAULT_MAX_CONCURRENT_REQUESTS,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the GitLab client.

        Args:
            api_url: GitLab instance URL, e.g. https://gitlab.com
            private_token: Personal or group access token with read_api scope
            max_concurrent_requests: Upper bound on requests in flight
            timeout: Request timeout in seconds
            transport: Optional httpx transport (for testing)
        """
        self.api_url = api_url.rstrip("/") if api_url else None
        self.private_token = private_token
        self.timeout = timeout
        self._transport = transport
        self._semaphore = asyncio.Semaphore(max_concurrent_requests)
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url and self.private_token)

    async def configure(self, api_url: str, private_token: str) -> None:
        """Point the client at a GitLab instance.

        Any open HTTP client is closed; a new one is created on the next request.
        """
        await self.close()
        self.api_url = api_url.rstrip("/")
        self.private_token = private_token

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client for the REST API."""
        if not self.is_configured:
            raise ConfigurationError("GitLab configuration not set")
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.api_url}/api/v4",
                headers={"PRIVATE-TOKEN": self.private_token or ""},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> GitLabClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # --- Transport ---

    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """Issue a GET request.

        Raises:
            ConfigurationError: If the client is not configured
            GitLabRequestError: On transport failure or an HTTP error status
        """
        client = self.client
        async with self._semaphore:
            try:
                response = await client.get(endpoint, params=params)
            except httpx.HTTPError as e:
                reason = sanitize_for_log(str(e))
                logger.warning("GET %s failed: %s", endpoint, reason)
                raise GitLabRequestError(f"GET {endpoint} failed: {reason}") from e

        if response.status_code >= 400:
            logger.warning("GET %s -> %d", endpoint, response.status_code)
            message = f"GET {endpoint} failed: {response.status_code} - {response.text[:500]}"
            if response.status_code == 401:
                raise InvalidTokenError(message, status_code=401)
            raise GitLabRequestError(message, status_code=response.status_code)

        logger.debug("GET %s -> %d", endpoint, response.status_code)
        return response

    async def _get_json(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Issue a GET request and decode its JSON body.

        Raises:
            GitLabRequestError: Also when the body is not valid JSON
        """
        response = await self._get(endpoint, params)
        return _decode(response, endpoint)

    async def _fetch_page(self, endpoint: str, params: dict[str, Any]) -> Page:
        response = await self._get(endpoint, params)
        items = _decode(response, endpoint) or []
        if not isinstance(items, list):
            raise GitLabRequestError(f"GET {endpoint} did not return a list")
        return Page(items=items, next_page=parse_next_page(response.headers.get("link")))

    async def _fetch_all(self, endpoint: str, params: dict[str, Any]) -> list[Any]:
        return await fetch_all(self._fetch_page, endpoint, params)

    # --- Groups ---

    async def get_group(self, group_id: int) -> Group:
        """Get a single group.

        Args:
            group_id: Numeric group ID

        Returns:
            The Group

        Raises:
            GroupNotFoundError: If the group doesn't exist
            GroupAccessDeniedError: If the token may not read the group
            InvalidTokenError: If the token is rejected
        """
        endpoint = f"/groups/{group_id}"
        try:
            data = await self._get_json(endpoint)
        except GitLabRequestError as e:
            if e.status_code == 404:
                raise GroupNotFoundError(str(e), status_code=404) from e
            if e.status_code == 403:
                raise GroupAccessDeniedError(str(e), status_code=403) from e
            raise
        return _parse(Group.from_api, data, endpoint)

    async def check_connection(self, group_id: int) -> Group:
        """Verify the configuration by fetching the root group.

        Errors are classified (401, 403, 404) so callers can show an
        actionable message via ``describe_connection_error``.
        """
        group = await self.get_group(group_id)
        logger.info("Connected to GitLab, found group %s (%s)", group.name, group.full_path)
        return group

    async def get_subgroups(self, group_id: int) -> list[Group]:
        """List the direct subgroups of a group.

        An inaccessible or malformed listing yields an empty list so that
        sibling discovery continues.
        """
        endpoint = f"/groups/{group_id}/subgroups"
        try:
            items = await self._fetch_all(endpoint, {"per_page": MAX_PER_PAGE})
            return [_parse(Group.from_api, item, endpoint) for item in items]
        except GitLabRequestError as e:
            logger.error("Error fetching subgroups for group %s: %s", group_id, e)
            return []

    async def get_group_projects(self, group_id: int) -> list[Project]:
        """List the projects directly inside a group (not recursive).

        An inaccessible or malformed listing yields an empty list.
        """
        endpoint = f"/groups/{group_id}/projects"
        try:
            items = await self._fetch_all(
                endpoint, {"per_page": MAX_PER_PAGE, "include_subgroups": "false"}
            )
            return [_parse(Project.from_api, item, endpoint) for item in items]
        except GitLabRequestError as e:
            logger.error("Error fetching projects for group %s: %s", group_id, e)
            return []

    async def get_all_project_ids(self, group_id: int) -> list[int]:
        """Collect the IDs of all projects in a group and its subgroups."""
        projects, subgroups = await asyncio.gather(
            self.get_group_projects(group_id),
            self.get_subgroups(group_id),
        )
        project_ids = [project.id for project in projects]
        if not subgroups:
            return project_ids

        nested = await asyncio.gather(
            *(self.get_all_project_ids(subgroup.id) for subgroup in subgroups)
        )
        for ids in nested:
            project_ids.extend(ids)
        return project_ids

    # --- Projects & pipelines ---

    async def get_project(self, project_id: int) -> Project:
        """Get a single project."""
        endpoint = f"/projects/{project_id}"
        return _parse(Project.from_api, await self._get_json(endpoint), endpoint)

    async def get_latest_pipeline(self, project_id: int) -> Pipeline | None:
        """Get the most recently updated pipeline of a project.

        Returns:
            The Pipeline, or None if the project has never run one

        Raises:
            GitLabRequestError: If the request fails or the response cannot be
                read as a pipeline (e.g. a status this client does not know)
        """
        endpoint = f"/projects/{project_id}/pipelines"
        pipelines = await self._get_json(
            endpoint, {"per_page": 1, "order_by": "updated_at", "sort": "desc"}
        )
        if not pipelines:
            return None
        if not isinstance(pipelines, list):
            raise GitLabRequestError(f"GET {endpoint} did not return a list")
        return _parse(Pipeline.from_api, pipelines[0], endpoint)

    async def get_active_pipelines(self, project_id: int) -> list[Pipeline]:
        """List all unfinished pipelines of a project.

        One request is made per active status; a failing request contributes
        no pipelines.
        """
        statuses = [status for status in PipelineStatus if status in ACTIVE_STATUSES]
        results = await asyncio.gather(
            *(self._get_pipelines_with_status(project_id, status) for status in statuses)
        )
        return [pipeline for batch in results for pipeline in batch]

    async def _get_pipelines_with_status(
        self, project_id: int, status: PipelineStatus
    ) -> list[Pipeline]:
        endpoint = f"/projects/{project_id}/pipelines"
        try:
            items = await self._get_json(
                endpoint, {"status": status.value, "per_page": MAX_PER_PAGE}
            )
            return [_parse(Pipeline.from_api, item, endpoint) for item in items or []]
        except GitLabRequestError as e:
            logger.debug("No %s pipelines for project %s: %s", status, project_id, e)
            return []

"""GitLab - Async REST client for groups, projects and pipelines."""

from groupwatch.gitlab.client import GitLabClient
from groupwatch.gitlab.exceptions import (
    ConfigurationError,
    GitLabError,
    GitLabRequestError,
    GroupAccessDeniedError,
    GroupNotFoundError,
    InvalidTokenError,
    describe_connection_error,
)
from groupwatch.gitlab.models import ACTIVE_STATUSES, Group, Pipeline, PipelineStatus, Project
from groupwatch.gitlab.pagination import MAX_PER_PAGE, fetch_all, parse_next_page

__all__ = [
    "ACTIVE_STATUSES",
    "MAX_PER_PAGE",
    "ConfigurationError",
    "GitLabClient",
    "GitLabError",
    "GitLabRequestError",
    "Group",
    "GroupAccessDeniedError",
    "GroupNotFoundError",
    "InvalidTokenError",
    "Pipeline",
    "PipelineStatus",
    "Project",
    "describe_connection_error",
    "fetch_all",
    "parse_next_page",
]
